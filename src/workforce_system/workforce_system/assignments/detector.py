"""Conflict detection for proposed shift assignments.

The detector only classifies: it never mutates state and never blocks a
write. Malformed times raise `InvalidTimeRangeError`; scheduling conflicts
are returned as `ConflictResult` values.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Mapping, Optional, Sequence

from ..availability.model import Unavailability
from ..common.datetime_utils import TimeLike, shift_interval
from ..core.constants import DEFAULT_DAILY_HOUR_CAP, DEFAULT_WEEKLY_HOUR_CAP
from ..rotations.model import EmployeeRotation
from .model import ConflictResult, ShiftAssignment
from .rules.base import ConflictRule, ProposedShift
from .rules.hours_rule import HoursRule
from .rules.overlap_rule import OverlapRule
from .rules.rotation_rule import RotationRule
from .rules.unavailable_rule import UnavailableRule

UnavailabilityLookup = Callable[[int, date], Optional[Unavailability]]


@dataclass(frozen=True)
class SchedulingLimits:
    weekly_hour_cap: float = DEFAULT_WEEKLY_HOUR_CAP
    daily_hour_cap: float = DEFAULT_DAILY_HOUR_CAP


class ConflictDetector:
    """Runs the conflict rules in priority order; the first match wins."""

    def __init__(self, limits: Optional[SchedulingLimits] = None, *, rules: Optional[Sequence[ConflictRule]] = None):
        self.limits = limits or SchedulingLimits()
        self._rules: tuple[ConflictRule, ...] = tuple(rules) if rules is not None else (
            OverlapRule(),
            UnavailableRule(),
            HoursRule(weekly_hour_cap=self.limits.weekly_hour_cap, daily_hour_cap=self.limits.daily_hour_cap),
            RotationRule(),
        )

    def detect(
        self,
        employee_id: int,
        work_date: date,
        shift_start: TimeLike,
        shift_end: TimeLike,
        existing_assignments: Iterable[ShiftAssignment],
        *,
        unavailability: Optional[Unavailability] = None,
        rotation: Optional[EmployeeRotation] = None,
        employee_name: Optional[str] = None,
        exclude_assignment_id: Optional[int] = None,
    ) -> ConflictResult:
        start_minute, end_minute = shift_interval(shift_start, shift_end)

        existing = [
            a
            for a in existing_assignments
            if a.employee_id == employee_id
            and not a.is_cancelled
            and (exclude_assignment_id is None or a.assignment_id != exclude_assignment_id)
        ]
        if rotation is not None and rotation.employee_ids and employee_id not in rotation.employee_ids:
            rotation = None

        proposed = ProposedShift(
            employee_id=employee_id,
            date=work_date,
            start_minute=start_minute,
            end_minute=end_minute,
            existing=existing,
            unavailability=unavailability if unavailability and unavailability.employee_id == employee_id else None,
            rotation=rotation,
            employee_label=employee_name or f"Employee #{employee_id}",
        )

        for rule in self._rules:
            conflict = rule.evaluate(proposed)
            if conflict is not None:
                return conflict
        return ConflictResult.none()

    def annotate(
        self,
        assignments: Sequence[ShiftAssignment],
        *,
        context: Optional[Sequence[ShiftAssignment]] = None,
        rotations: Optional[Mapping[int, EmployeeRotation]] = None,
        unavailability_for: Optional[UnavailabilityLookup] = None,
    ) -> list[ShiftAssignment]:
        """Recompute has_conflict/conflict_reason of each assignment.

        Each one is checked against `context` (defaults to `assignments`
        itself), which should hold the neighbouring days and the whole week.
        """
        rotations = rotations or {}
        existing = list(context) if context is not None else assignments
        out: list[ShiftAssignment] = []
        for a in assignments:
            if a.is_cancelled:
                out.append(a.with_conflict(ConflictResult.none()))
                continue
            conflict = self.detect(
                a.employee_id,
                a.date,
                a.shift_start,
                a.shift_end,
                existing,
                unavailability=unavailability_for(a.employee_id, a.date) if unavailability_for else None,
                rotation=rotations.get(a.employee_id),
                employee_name=a.employee_name,
                exclude_assignment_id=a.assignment_id,
            )
            out.append(a.with_conflict(conflict))
        return out


def detect_conflicts(
    employee_id: int,
    work_date: date,
    shift_start: TimeLike,
    shift_end: TimeLike,
    existing_assignments: Iterable[ShiftAssignment],
    *,
    unavailability: Optional[Unavailability] = None,
    rotation: Optional[EmployeeRotation] = None,
    limits: Optional[SchedulingLimits] = None,
) -> ConflictResult:
    return ConflictDetector(limits).detect(
        employee_id,
        work_date,
        shift_start,
        shift_end,
        existing_assignments,
        unavailability=unavailability,
        rotation=rotation,
    )
