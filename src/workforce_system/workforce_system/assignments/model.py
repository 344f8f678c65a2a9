from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, time
from typing import Optional

from ..common.datetime_utils import format_time, shift_interval, shift_minutes
from ..core.constants import MINUTES_PER_DAY
from ..core.enums import AssignmentStatus, ConflictSeverity, ConflictType, ShiftType


@dataclass(frozen=True)
class ShiftAssignment:
    """A dated, timed work commitment for one employee.

    `shift_end` at or before `shift_start` means the shift crosses midnight.
    `has_conflict`/`conflict_reason` are recomputed on demand, not authoritative.
    """

    assignment_id: int
    employee_id: int
    date: date
    shift_start: time
    shift_end: time
    shift_type: ShiftType = ShiftType.CUSTOM
    status: AssignmentStatus = AssignmentStatus.SCHEDULED
    is_overtime: bool = False
    overtime_hours: Optional[float] = None
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    employee_name: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    has_conflict: bool = False
    conflict_reason: Optional[str] = None

    @property
    def is_cancelled(self) -> bool:
        return self.status == AssignmentStatus.CANCELLED

    @property
    def duration_minutes(self) -> int:
        return shift_minutes(self.shift_start, self.shift_end)

    def interval_from(self, reference: date) -> tuple[int, int]:
        """[start, end) in minutes measured from midnight of `reference`."""
        start, end = shift_interval(self.shift_start, self.shift_end)
        offset = (self.date - reference).days * MINUTES_PER_DAY
        return start + offset, end + offset

    def time_label(self) -> str:
        return f"{format_time(self.shift_start)}-{format_time(self.shift_end)}"

    def with_conflict(self, conflict: "ConflictResult") -> "ShiftAssignment":
        return replace(
            self,
            has_conflict=conflict.has_conflict,
            conflict_reason=conflict.message if conflict.has_conflict else None,
        )


@dataclass(frozen=True)
class ConflictResult:
    """Outcome of one conflict check; never persisted as a source of truth."""

    type: ConflictType
    severity: ConflictSeverity
    message: str
    conflicting_shift: Optional[ShiftAssignment] = None
    resolution: Optional[str] = None

    @property
    def has_conflict(self) -> bool:
        return self.type != ConflictType.NONE

    @property
    def is_blocking(self) -> bool:
        return self.severity == ConflictSeverity.CRITICAL

    @classmethod
    def none(cls) -> "ConflictResult":
        return cls(type=ConflictType.NONE, severity=ConflictSeverity.NONE, message="No conflicts detected")

    def to_dict(self) -> dict:
        data = {
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            "resolution": self.resolution,
            "conflicting_shift": None,
        }
        if self.conflicting_shift is not None:
            data["conflicting_shift"] = {
                "assignment_id": self.conflicting_shift.assignment_id,
                "date": self.conflicting_shift.date.isoformat(),
                "shift_start": format_time(self.conflicting_shift.shift_start),
                "shift_end": format_time(self.conflicting_shift.shift_end),
            }
        return data


def infer_shift_type(shift_start: time) -> ShiftType:
    """Classify a shift by its start hour."""
    hour = shift_start.hour
    if 6 <= hour < 12:
        return ShiftType.MORNING
    if 12 <= hour < 18:
        return ShiftType.AFTERNOON
    if 18 <= hour < 22:
        return ShiftType.NIGHT
    return ShiftType.GRAVEYARD


def overtime_hours(duration_hours: float, standard_hours: float) -> float:
    return round(max(0.0, duration_hours - standard_hours), 1)
