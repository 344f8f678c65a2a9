from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import AssignmentStatus, ShiftType
from .model import ShiftAssignment


class AssignmentRepository(Protocol):
    def get_by_id(self, assignment_id: int) -> Optional[ShiftAssignment]:
        raise NotImplementedError

    def list_range(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
        department_id: Optional[int] = None,
    ) -> Sequence[ShiftAssignment]:
        """Assignments dated within [start, end], cancelled ones included."""

        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        work_date: date,
        shift_start: time,
        shift_end: time,
        shift_type: ShiftType,
        department_id: Optional[int] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
        is_overtime: bool = False,
        overtime_hours: Optional[float] = None,
        has_conflict: bool = False,
        conflict_reason: Optional[str] = None,
    ) -> int:
        """Returns assignment_id."""

        raise NotImplementedError

    def save(self, assignment: ShiftAssignment) -> bool:
        """Persist every editable field of an existing assignment."""

        raise NotImplementedError

    def set_status(self, *, assignment_id: int, status: AssignmentStatus) -> bool:
        raise NotImplementedError

    def set_overtime(self, *, assignment_id: int, is_overtime: bool, overtime_hours: Optional[float]) -> bool:
        raise NotImplementedError

    def delete(self, *, assignment_id: int) -> bool:
        raise NotImplementedError
