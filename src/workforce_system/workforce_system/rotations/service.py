from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.validators import require_manager, require_non_empty, require_positive_int
from ..core.enums import Role, RotationPatternType
from ..core.exceptions import InvalidPatternError, NotFoundError, ValidationError
from .engine import build_pattern, coverage_stats, project_range
from .model import EmployeeRotation, RotationCoverage, RotationDay
from .repository import RotationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RotationPreview:
    rotation: EmployeeRotation
    days: list[RotationDay]
    stats: RotationCoverage


class RotationService:
    def __init__(self, rotations: RotationRepository):
        self._rotations = rotations

    @staticmethod
    def _pattern_type(value) -> RotationPatternType:
        try:
            return RotationPatternType(value)
        except ValueError:
            raise InvalidPatternError(f"Unknown rotation pattern type: {value!r}")

    def list_rotations(self, *, active_only: bool = False) -> Sequence[EmployeeRotation]:
        return self._rotations.list_all(active_only=active_only)

    def get(self, rotation_id: int) -> EmployeeRotation:
        rotation = self._rotations.get_by_id(int(rotation_id))
        if not rotation:
            raise NotFoundError("Rotation not found")
        return rotation

    def rotation_for_employee(self, employee_id: int) -> Optional[EmployeeRotation]:
        return self._rotations.get_active_for_employee(int(employee_id))

    def create_rotation(
        self,
        *,
        current_role: Role,
        name: str,
        pattern_type: RotationPatternType | str,
        start_date: date,
        custom_pattern: Optional[Sequence[int]] = None,
        end_date: Optional[date] = None,
        department_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> int:
        require_manager(current_role)

        name = require_non_empty(name, "Rotation name")
        if end_date is not None and end_date < start_date:
            raise ValidationError("Rotation end date cannot be before its start date")

        kind = self._pattern_type(pattern_type)
        description = description.strip() if description else None
        pattern = build_pattern(kind, custom_pattern, description=description)

        rotation_id = self._rotations.create(
            name=name,
            pattern_type=kind,
            pattern=pattern,
            start_date=start_date,
            end_date=end_date,
            department_id=int(department_id) if department_id else None,
            description=description,
        )
        logger.info("Created rotation %s (%s, cycle=%d)", rotation_id, kind.value, pattern.cycle_length)
        return rotation_id

    def replace_pattern(
        self,
        *,
        current_role: Role,
        rotation_id: int,
        pattern_type: RotationPatternType | str,
        custom_pattern: Optional[Sequence[int]] = None,
    ) -> None:
        require_manager(current_role)

        rotation = self.get(rotation_id)
        kind = self._pattern_type(pattern_type)
        pattern = build_pattern(kind, custom_pattern, description=rotation.pattern.description)

        if not self._rotations.replace_pattern(rotation_id=rotation.rotation_id, pattern_type=kind, pattern=pattern):
            raise ValidationError("Failed to update rotation pattern")

    def deactivate(self, *, current_role: Role, rotation_id: int) -> None:
        require_manager(current_role)

        rotation = self.get(rotation_id)
        if not rotation.is_active:
            return
        if not self._rotations.deactivate(rotation_id=rotation.rotation_id):
            raise ValidationError("Failed to deactivate rotation")
        logger.info("Deactivated rotation %s", rotation.rotation_id)

    def assign_employees(self, *, current_role: Role, rotation_id: int, employee_ids: Iterable[int]) -> int:
        require_manager(current_role)

        rotation = self.get(rotation_id)
        if not rotation.is_active:
            raise ValidationError("Cannot assign employees to an inactive rotation")

        ids = {require_positive_int(e, "Employee") for e in employee_ids}
        if not ids:
            raise ValidationError("Select at least one employee")
        return self._rotations.assign_employees(rotation_id=rotation.rotation_id, employee_ids=ids)

    def preview(self, *, rotation_id: int, start: date, end: date) -> RotationPreview:
        rotation = self.get(rotation_id)
        days = list(project_range(rotation.pattern, rotation.start_date, start, end))
        stats = coverage_stats(rotation.pattern, rotation.start_date, start, end)
        return RotationPreview(rotation=rotation, days=days, stats=stats)
