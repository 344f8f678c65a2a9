from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, time, timedelta
from typing import Iterable, Optional, Sequence

from ..availability.repository import AvailabilityRepository
from ..common.datetime_utils import TimeLike, iter_dates, parse_shift_time, require_range, shift_hours, week_bounds
from ..common.validators import require_manager, require_positive_int, require_scheduler
from ..core.constants import DEFAULT_STANDARD_SHIFT_HOURS
from ..core.enums import AssignmentStatus, Role, ShiftType
from ..core.exceptions import InvalidTimeRangeError, NotFoundError, ValidationError
from ..rotations.engine import is_work_day
from ..rotations.model import EmployeeRotation
from ..rotations.repository import RotationRepository
from ..schedules.model import WorkSchedule
from ..schedules.repository import ScheduleRepository
from .detector import ConflictDetector
from .model import ConflictResult, ShiftAssignment, infer_shift_type, overtime_hours
from .repository import AssignmentRepository

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[AssignmentStatus, frozenset[AssignmentStatus]] = {
    AssignmentStatus.SCHEDULED: frozenset({AssignmentStatus.IN_PROGRESS, AssignmentStatus.CANCELLED}),
    AssignmentStatus.IN_PROGRESS: frozenset({AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED}),
    AssignmentStatus.COMPLETED: frozenset(),
    AssignmentStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class NewShiftAssignment:
    employee_id: int
    work_date: date
    shift_start: TimeLike
    shift_end: TimeLike
    shift_type: Optional[ShiftType | str] = None
    department_id: Optional[int] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    is_overtime: bool = False


@dataclass(frozen=True)
class AssignmentOutcome:
    """Result of a scheduling action; `assignment_id` is None when a critical conflict blocked it."""

    employee_id: int
    work_date: date
    conflict: ConflictResult
    assignment_id: Optional[int] = None

    @property
    def created(self) -> bool:
        return self.assignment_id is not None


@dataclass(frozen=True)
class BulkAssignmentResult:
    outcomes: list[AssignmentOutcome] = field(default_factory=list)
    skipped_rest_days: int = 0
    skipped_off_days: int = 0

    @property
    def created(self) -> list[AssignmentOutcome]:
        return [o for o in self.outcomes if o.created]

    @property
    def blocked(self) -> list[AssignmentOutcome]:
        return [o for o in self.outcomes if not o.created]

    @property
    def conflict_count(self) -> int:
        return sum(1 for o in self.outcomes if o.conflict.has_conflict)


class AssignmentService:
    def __init__(
        self,
        assignments: AssignmentRepository,
        *,
        detector: Optional[ConflictDetector] = None,
        availability: Optional[AvailabilityRepository] = None,
        rotations: Optional[RotationRepository] = None,
        schedules: Optional[ScheduleRepository] = None,
        standard_shift_hours: float = DEFAULT_STANDARD_SHIFT_HOURS,
    ):
        self._assignments = assignments
        self._detector = detector or ConflictDetector()
        self._availability = availability
        self._rotations = rotations
        self._schedules = schedules
        self._standard_shift_hours = float(standard_shift_hours)

    # ---- lookups -------------------------------------------------------

    def get(self, assignment_id: int) -> ShiftAssignment:
        assignment = self._assignments.get_by_id(int(assignment_id))
        if not assignment:
            raise NotFoundError("Assignment not found")
        return assignment

    def _rotation_for(self, employee_id: int) -> Optional[EmployeeRotation]:
        if not self._rotations:
            return None
        return self._rotations.get_active_for_employee(employee_id)

    def _schedule(self, schedule_id: int) -> WorkSchedule:
        if not self._schedules:
            raise ValidationError("Work schedules are not configured")
        schedule = self._schedules.get_by_id(require_positive_int(schedule_id, "Schedule"))
        if not schedule:
            raise NotFoundError("Schedule not found")
        return schedule

    def _unavailability_for(self, employee_id: int, work_date: date):
        if not self._availability:
            return None
        return self._availability.get_unavailability(employee_id=employee_id, work_date=work_date)

    def _existing_around(self, employee_id: int, work_date: date) -> Sequence[ShiftAssignment]:
        # The whole Mon-Sun week plus the neighbouring days for shifts crossing midnight.
        monday, sunday = week_bounds(work_date)
        start = min(monday, work_date - timedelta(days=1))
        end = max(sunday, work_date + timedelta(days=1))
        return self._assignments.list_range(start=start, end=end, employee_id=employee_id)

    # ---- conflict checks -----------------------------------------------

    @staticmethod
    def _parse_times(shift_start: TimeLike, shift_end: TimeLike) -> tuple[time, time]:
        start = parse_shift_time(shift_start)
        end = parse_shift_time(shift_end)
        if start == end:
            raise InvalidTimeRangeError("End time must be different from start time")
        return start, end

    def check_conflicts(
        self,
        *,
        employee_id: int,
        work_date: date,
        shift_start: TimeLike,
        shift_end: TimeLike,
        exclude_assignment_id: Optional[int] = None,
        employee_name: Optional[str] = None,
    ) -> ConflictResult:
        employee_id = require_positive_int(employee_id, "Employee")
        return self._detector.detect(
            employee_id,
            work_date,
            shift_start,
            shift_end,
            self._existing_around(employee_id, work_date),
            unavailability=self._unavailability_for(employee_id, work_date),
            rotation=self._rotation_for(employee_id),
            employee_name=employee_name,
            exclude_assignment_id=exclude_assignment_id,
        )

    def _may_proceed(self, *, conflict: ConflictResult, current_role: Role, override: bool, label: str) -> bool:
        if not conflict.is_blocking:
            return True
        if not override:
            return False

        require_manager(current_role)
        logger.warning("Conflict override by %s on %s: %s", current_role.value, label, conflict.message)
        return True

    # ---- scheduling actions --------------------------------------------

    def _resolve_shift_type(self, value: Optional[ShiftType | str], start: time) -> ShiftType:
        if value in (None, ""):
            return infer_shift_type(start)
        try:
            return ShiftType(value)
        except ValueError:
            raise ValidationError(f"Unknown shift type: {value!r}")

    def create(self, *, current_role: Role, new: NewShiftAssignment, override: bool = False) -> AssignmentOutcome:
        require_scheduler(current_role)

        employee_id = require_positive_int(new.employee_id, "Employee")
        start, end = self._parse_times(new.shift_start, new.shift_end)
        conflict = self.check_conflicts(employee_id=employee_id, work_date=new.work_date, shift_start=start, shift_end=end)

        label = f"employee {employee_id} {new.work_date.isoformat()}"
        if not self._may_proceed(conflict=conflict, current_role=current_role, override=override, label=label):
            logger.info("Blocked assignment for %s: %s", label, conflict.message)
            return AssignmentOutcome(employee_id=employee_id, work_date=new.work_date, conflict=conflict)

        duration = shift_hours(start, end)
        assignment_id = self._assignments.create(
            employee_id=employee_id,
            work_date=new.work_date,
            shift_start=start,
            shift_end=end,
            shift_type=self._resolve_shift_type(new.shift_type, start),
            department_id=int(new.department_id) if new.department_id else None,
            location=(new.location or "").strip() or None,
            notes=(new.notes or "").strip() or None,
            is_overtime=bool(new.is_overtime),
            overtime_hours=overtime_hours(duration, self._standard_shift_hours) if new.is_overtime else None,
            has_conflict=conflict.has_conflict,
            conflict_reason=conflict.message if conflict.has_conflict else None,
        )
        return AssignmentOutcome(
            employee_id=employee_id,
            work_date=new.work_date,
            conflict=conflict,
            assignment_id=assignment_id,
        )

    def bulk_assign(
        self,
        *,
        current_role: Role,
        employee_ids: Iterable[int],
        date_from: date,
        date_to: date,
        shift_start: Optional[TimeLike] = None,
        shift_end: Optional[TimeLike] = None,
        schedule_id: Optional[int] = None,
        shift_type: Optional[ShiftType | str] = None,
        department_id: Optional[int] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
        skip_rest_days: bool = False,
        override: bool = False,
    ) -> BulkAssignmentResult:
        """Employees x dates, each generated assignment checked on its own.

        Assignments created earlier in the batch are visible to later checks,
        so re-running the same input never double-books.

        With `schedule_id` each date takes its times from that schedule's
        weekday entry (overriding `shift_start`/`shift_end`); dates the
        schedule does not cover are skipped.
        """
        require_scheduler(current_role)
        # Checked up front so a batch is never half-written.
        if override:
            require_manager(current_role)
        require_range(date_from, date_to)
        ids = sorted({require_positive_int(e, "Employee") for e in employee_ids})
        if not ids:
            raise ValidationError("Select at least one employee")

        schedule = self._schedule(schedule_id) if schedule_id is not None else None
        if schedule is None:
            self._parse_times(shift_start, shift_end)
        elif department_id is None:
            department_id = schedule.department_id

        outcomes: list[AssignmentOutcome] = []
        skipped_rest = 0
        skipped_off = 0
        for employee_id in ids:
            rotation = self._rotation_for(employee_id) if skip_rest_days else None
            for work_date in iter_dates(date_from, date_to):
                if rotation and rotation.applies_on(work_date) and not is_work_day(rotation.pattern, rotation.start_date, work_date):
                    skipped_rest += 1
                    continue

                start, end = shift_start, shift_end
                if schedule is not None:
                    day = schedule.shift_for(work_date)
                    if day is None:
                        skipped_off += 1
                        continue
                    start, end = day.start, day.end

                outcomes.append(
                    self.create(
                        current_role=current_role,
                        new=NewShiftAssignment(
                            employee_id=employee_id,
                            work_date=work_date,
                            shift_start=start,
                            shift_end=end,
                            shift_type=shift_type,
                            department_id=department_id,
                            location=location,
                            notes=notes,
                        ),
                        override=override,
                    )
                )

        result = BulkAssignmentResult(outcomes=outcomes, skipped_rest_days=skipped_rest, skipped_off_days=skipped_off)
        logger.info(
            "Bulk assignment: %d created, %d blocked, %d rest days and %d off days skipped",
            len(result.created),
            len(result.blocked),
            skipped_rest,
            skipped_off,
        )
        return result

    def update(
        self,
        *,
        current_role: Role,
        assignment_id: int,
        changes: NewShiftAssignment,
        override: bool = False,
    ) -> AssignmentOutcome:
        require_scheduler(current_role)

        current = self.get(assignment_id)
        if current.status in (AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED):
            raise ValidationError(f"A {current.status.value} assignment cannot be edited")

        employee_id = require_positive_int(changes.employee_id, "Employee")
        start, end = self._parse_times(changes.shift_start, changes.shift_end)
        conflict = self.check_conflicts(
            employee_id=employee_id,
            work_date=changes.work_date,
            shift_start=start,
            shift_end=end,
            exclude_assignment_id=current.assignment_id,
            employee_name=current.employee_name if employee_id == current.employee_id else None,
        )

        label = f"assignment {current.assignment_id}"
        if not self._may_proceed(conflict=conflict, current_role=current_role, override=override, label=label):
            return AssignmentOutcome(employee_id=employee_id, work_date=changes.work_date, conflict=conflict)

        is_overtime = bool(changes.is_overtime)
        updated = replace(
            current,
            employee_id=employee_id,
            date=changes.work_date,
            shift_start=start,
            shift_end=end,
            shift_type=self._resolve_shift_type(changes.shift_type, start),
            department_id=int(changes.department_id) if changes.department_id else None,
            location=(changes.location or "").strip() or None,
            notes=(changes.notes or "").strip() or None,
            is_overtime=is_overtime,
            overtime_hours=overtime_hours(shift_hours(start, end), self._standard_shift_hours) if is_overtime else None,
        ).with_conflict(conflict)

        if not self._assignments.save(updated):
            raise ValidationError("Failed to update assignment")
        return AssignmentOutcome(
            employee_id=employee_id,
            work_date=changes.work_date,
            conflict=conflict,
            assignment_id=current.assignment_id,
        )

    def set_status(self, *, current_role: Role, assignment_id: int, status: AssignmentStatus | str) -> None:
        require_scheduler(current_role)

        try:
            target = AssignmentStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown assignment status: {status!r}")

        current = self.get(assignment_id)
        if target not in _TRANSITIONS[current.status]:
            raise ValidationError(f"Cannot change status from {current.status.value} to {target.value}")
        if not self._assignments.set_status(assignment_id=current.assignment_id, status=target):
            raise ValidationError("Failed to update assignment status")

    def cancel(self, *, current_role: Role, assignment_id: int) -> None:
        self.set_status(current_role=current_role, assignment_id=assignment_id, status=AssignmentStatus.CANCELLED)

    def delete(self, *, current_role: Role, assignment_id: int) -> None:
        require_scheduler(current_role)

        current = self.get(assignment_id)
        if current.status == AssignmentStatus.COMPLETED:
            raise ValidationError("Completed assignments can only be cancelled, not deleted")
        if not self._assignments.delete(assignment_id=current.assignment_id):
            raise ValidationError("Failed to delete assignment")

    def mark_overtime(
        self,
        *,
        current_role: Role,
        assignment_id: int,
        is_overtime: bool = True,
        hours: Optional[float] = None,
    ) -> None:
        """Overtime is informational only; it never triggers a conflict."""
        require_scheduler(current_role)

        current = self.get(assignment_id)
        if current.is_cancelled:
            raise ValidationError("A cancelled assignment cannot be marked as overtime")

        if not is_overtime:
            new_hours = None
        elif hours is not None:
            if float(hours) < 0:
                raise ValidationError("Overtime hours cannot be negative")
            new_hours = round(float(hours), 1)
        else:
            new_hours = overtime_hours(shift_hours(current.shift_start, current.shift_end), self._standard_shift_hours)

        if current.is_overtime == bool(is_overtime) and current.overtime_hours == new_hours:
            return
        if not self._assignments.set_overtime(assignment_id=current.assignment_id, is_overtime=bool(is_overtime), overtime_hours=new_hours):
            raise ValidationError("Failed to update overtime")

    # ---- reads ---------------------------------------------------------

    def list_assignments(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
        department_id: Optional[int] = None,
        recompute_conflicts: bool = True,
    ) -> list[ShiftAssignment]:
        require_range(start, end)
        rows = list(self._assignments.list_range(start=start, end=end, employee_id=employee_id, department_id=department_id))
        if not recompute_conflicts or not rows:
            return rows

        rotations: dict[int, EmployeeRotation] = {}
        for emp_id in {a.employee_id for a in rows}:
            rotation = self._rotation_for(emp_id)
            if rotation:
                rotations[emp_id] = rotation

        return self._detector.annotate(
            rows,
            context=self._conflict_context(rows, start=start, end=end),
            rotations=rotations,
            unavailability_for=self._unavailability_for,
        )

    def _conflict_context(self, rows: Sequence[ShiftAssignment], *, start: date, end: date) -> list[ShiftAssignment]:
        # Whole weeks plus the neighbouring days, every department, listed employees only.
        employees = {a.employee_id for a in rows}
        wide_start = min(week_bounds(start)[0], start - timedelta(days=1))
        wide_end = max(week_bounds(end)[1], end + timedelta(days=1))
        if len(employees) == 1:
            return list(self._assignments.list_range(start=wide_start, end=wide_end, employee_id=next(iter(employees))))
        return [a for a in self._assignments.list_range(start=wide_start, end=wide_end) if a.employee_id in employees]
