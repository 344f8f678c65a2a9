from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .assignments.detector import ConflictDetector, SchedulingLimits
from .assignments.mysql_assignment_repository import MySQLAssignmentRepository
from .assignments.service import AssignmentService
from .availability.mysql_availability_repository import MySQLAvailabilityRepository
from .core import constants
from .coverage.model import CoverageThresholds
from .coverage.service import CoverageService
from .database.connection import DBConfig, DatabaseConnection
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .rotations.mysql_rotation_repository import MySQLRotationRepository
from .rotations.service import RotationService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ScheduleService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    rotations_repo: MySQLRotationRepository
    assignments_repo: MySQLAssignmentRepository
    availability_repo: MySQLAvailabilityRepository
    departments_repo: MySQLDepartmentRepository
    schedules_repo: MySQLScheduleRepository

    rotation_service: RotationService
    schedule_service: ScheduleService
    assignment_service: AssignmentService
    coverage_service: CoverageService


def build_container(*, db_config: Mapping[str, Any], settings: Optional[Mapping[str, Any]] = None) -> Container:
    """Wire repositories and services; `settings` overrides the scheduling defaults."""
    settings = settings or {}
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    rotations_repo = MySQLRotationRepository(conn)
    assignments_repo = MySQLAssignmentRepository(conn)
    availability_repo = MySQLAvailabilityRepository(conn)
    departments_repo = MySQLDepartmentRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)

    detector = ConflictDetector(
        SchedulingLimits(
            weekly_hour_cap=float(settings.get("WEEKLY_HOUR_CAP", constants.DEFAULT_WEEKLY_HOUR_CAP)),
            daily_hour_cap=float(settings.get("DAILY_HOUR_CAP", constants.DEFAULT_DAILY_HOUR_CAP)),
        )
    )
    rotation_service = RotationService(rotations_repo)
    schedule_service = ScheduleService(schedules_repo)
    assignment_service = AssignmentService(
        assignments_repo,
        detector=detector,
        availability=availability_repo,
        rotations=rotations_repo,
        schedules=schedules_repo,
        standard_shift_hours=float(settings.get("STANDARD_SHIFT_HOURS", constants.DEFAULT_STANDARD_SHIFT_HOURS)),
    )
    coverage_service = CoverageService(
        assignment_service,
        departments_repo,
        required_staff_per_day=int(settings.get("REQUIRED_STAFF_PER_DAY", constants.DEFAULT_REQUIRED_STAFF_PER_DAY)),
        thresholds=CoverageThresholds(
            adequate=int(settings.get("COVERAGE_ADEQUATE_THRESHOLD", constants.COVERAGE_ADEQUATE_THRESHOLD)),
            overstaffed=int(settings.get("COVERAGE_OVERSTAFFED_THRESHOLD", constants.COVERAGE_OVERSTAFFED_THRESHOLD)),
        ),
    )

    return Container(
        conn=conn,
        rotations_repo=rotations_repo,
        assignments_repo=assignments_repo,
        availability_repo=availability_repo,
        departments_repo=departments_repo,
        schedules_repo=schedules_repo,
        rotation_service=rotation_service,
        schedule_service=schedule_service,
        assignment_service=assignment_service,
        coverage_service=coverage_service,
    )
