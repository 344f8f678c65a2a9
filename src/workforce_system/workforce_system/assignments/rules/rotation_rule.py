from __future__ import annotations

from typing import Optional

from ...core.enums import ConflictSeverity, ConflictType
from ...rotations.engine import is_work_day
from ..model import ConflictResult
from .base import ConflictRule, ProposedShift


class RotationRule(ConflictRule):
    """Shift placed on a rest day of the employee's active rotation."""

    def evaluate(self, proposed: ProposedShift) -> Optional[ConflictResult]:
        rotation = proposed.rotation
        if rotation is None or not rotation.applies_on(proposed.date):
            return None
        if is_work_day(rotation.pattern, rotation.start_date, proposed.date):
            return None
        return ConflictResult(
            type=ConflictType.ROTATION_CONFLICT,
            severity=ConflictSeverity.WARNING,
            message=(
                f"{proposed.date.isoformat()} is a rest day for {proposed.employee_label} "
                f"in rotation '{rotation.name}'"
            ),
            resolution="Pick a work day of the rotation or confirm the rest-day shift",
        )
