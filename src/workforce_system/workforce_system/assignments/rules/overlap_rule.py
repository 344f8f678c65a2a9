from __future__ import annotations

from typing import Optional

from ...core.enums import ConflictSeverity, ConflictType
from ..model import ConflictResult
from .base import ConflictRule, ProposedShift


def intervals_overlap(a: tuple[int, int], b: tuple[int, int]) -> bool:
    """Half-open intervals [start, end) intersect."""
    return a[0] < b[1] and b[0] < a[1]


class OverlapRule(ConflictRule):
    """Same-employee shifts whose time spans intersect.

    Shifts on the previous and next day are placed on the proposed date's
    clock so a shift crossing midnight is compared against both days.
    """

    resolution = "Choose a non-overlapping time or reassign the existing shift"

    def evaluate(self, proposed: ProposedShift) -> Optional[ConflictResult]:
        window = (proposed.start_minute, proposed.end_minute)
        for existing in proposed.existing:
            if abs((existing.date - proposed.date).days) > 1:
                continue
            if not intervals_overlap(window, existing.interval_from(proposed.date)):
                continue
            return ConflictResult(
                type=ConflictType.OVERLAP,
                severity=ConflictSeverity.CRITICAL,
                message=(
                    f"{proposed.employee_label} already has a shift on "
                    f"{existing.date.isoformat()} ({existing.time_label()})"
                ),
                conflicting_shift=existing,
                resolution=self.resolution,
            )
        return None
