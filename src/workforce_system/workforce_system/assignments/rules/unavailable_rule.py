from __future__ import annotations

from typing import Optional

from ...core.enums import ConflictSeverity, ConflictType
from ..model import ConflictResult
from .base import ConflictRule, ProposedShift


class UnavailableRule(ConflictRule):
    """Employee is on leave (or otherwise unavailable) that day."""

    def evaluate(self, proposed: ProposedShift) -> Optional[ConflictResult]:
        blocked = proposed.unavailability
        if blocked is None or not blocked.covers(proposed.date):
            return None
        return ConflictResult(
            type=ConflictType.UNAVAILABLE,
            severity=ConflictSeverity.CRITICAL,
            message=f"{proposed.employee_label} is unavailable on {proposed.date.isoformat()} ({blocked.reason})",
            resolution="Assign another employee or pick a date outside the leave period",
        )
