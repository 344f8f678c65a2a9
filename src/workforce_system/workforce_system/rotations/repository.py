from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import RotationPatternType
from .model import EmployeeRotation, RotationPattern


class RotationRepository(Protocol):
    def list_all(self, *, active_only: bool = False) -> Sequence[EmployeeRotation]:
        raise NotImplementedError

    def get_by_id(self, rotation_id: int) -> Optional[EmployeeRotation]:
        raise NotImplementedError

    def get_active_for_employee(self, employee_id: int) -> Optional[EmployeeRotation]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        pattern_type: RotationPatternType,
        pattern: RotationPattern,
        start_date: date,
        end_date: Optional[date] = None,
        department_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> int:
        """Returns rotation_id."""

        raise NotImplementedError

    def replace_pattern(self, *, rotation_id: int, pattern_type: RotationPatternType, pattern: RotationPattern) -> bool:
        raise NotImplementedError

    def deactivate(self, *, rotation_id: int) -> bool:
        raise NotImplementedError

    def assign_employees(self, *, rotation_id: int, employee_ids: Iterable[int]) -> int:
        """Bind employees to the rotation, detaching them from any other active rotation.

        Returns the number of employees bound.
        """

        raise NotImplementedError
