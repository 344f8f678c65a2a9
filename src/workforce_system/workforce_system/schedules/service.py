from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_shift_time
from ..common.validators import require_manager, require_non_empty
from ..core.enums import Role, ScheduleStatus
from ..core.exceptions import InvalidTimeRangeError, NotFoundError, ValidationError
from .model import WEEKDAYS, DayShift, ScheduleSummary, WorkSchedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


def parse_week(days: Optional[Mapping[Any, Any]]) -> dict[int, DayShift]:
    """Map of weekday (name or 0-6 index) to (start, end) or {"start", "end"}."""
    if days is not None and not isinstance(days, Mapping):
        raise ValidationError("days must map weekdays to shift times")

    week: dict[int, DayShift] = {}
    for key, times in (days or {}).items():
        if isinstance(key, str) and key.strip().lower() in WEEKDAYS:
            index = WEEKDAYS.index(key.strip().lower())
        elif isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(WEEKDAYS):
            index = key
        else:
            raise ValidationError(f"Unknown weekday: {key!r}")

        if not times:
            continue
        if isinstance(times, Mapping):
            start, end = times.get("start"), times.get("end")
        elif isinstance(times, (list, tuple)) and len(times) == 2:
            start, end = times
        else:
            raise InvalidTimeRangeError(f"{WEEKDAYS[index].capitalize()} needs both a start and an end time")
        if not start or not end:
            raise InvalidTimeRangeError(f"{WEEKDAYS[index].capitalize()} needs both a start and an end time")

        shift = DayShift(start=parse_shift_time(start), end=parse_shift_time(end))
        if shift.start == shift.end:
            raise InvalidTimeRangeError(f"{WEEKDAYS[index].capitalize()} end time must be different from start time")
        week[index] = shift
    return week


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    @staticmethod
    def _status(value) -> ScheduleStatus:
        try:
            return ScheduleStatus(value)
        except ValueError:
            raise ValidationError(f"Unknown schedule status: {value!r}")

    @staticmethod
    def _number(value, field_name: str, kind=float):
        try:
            return kind(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{field_name} must be a number")

    @staticmethod
    def _validate(schedule: WorkSchedule) -> None:
        if schedule.expires_at is not None and schedule.expires_at < schedule.effective_date:
            raise ValidationError("Schedule expiry cannot be before its effective date")
        if schedule.status == ScheduleStatus.ACTIVE and not schedule.days:
            raise ValidationError("An active schedule needs at least one working day")
        if schedule.overtime_threshold <= 0:
            raise ValidationError("Overtime threshold must be positive")
        if schedule.lunch_break_minutes < 0:
            raise ValidationError("Lunch break cannot be negative")

    def list_schedules(self, *, department_id: Optional[int] = None, status: Optional[ScheduleStatus | str] = None, today: Optional[date] = None) -> list[WorkSchedule]:
        schedules = list(self._schedules.list_all(department_id=department_id))
        if status is None:
            return schedules
        wanted = self._status(status)
        today = today or date.today()
        return [s for s in schedules if s.status_on(today) == wanted]

    def get(self, schedule_id: int) -> WorkSchedule:
        schedule = self._schedules.get_by_id(int(schedule_id))
        if not schedule:
            raise NotFoundError("Schedule not found")
        return schedule

    def summary(self, *, today: Optional[date] = None) -> ScheduleSummary:
        today = today or date.today()
        statuses = [s.status_on(today) for s in self._schedules.list_all()]
        return ScheduleSummary(
            total_schedules=len(statuses),
            active_schedules=statuses.count(ScheduleStatus.ACTIVE),
            expired_schedules=statuses.count(ScheduleStatus.EXPIRED),
            draft_schedules=statuses.count(ScheduleStatus.DRAFT),
        )

    def create_schedule(
        self,
        *,
        current_role: Role,
        name: str,
        effective_date: date,
        days: Optional[Mapping[Any, Any]],
        expires_at: Optional[date] = None,
        status: ScheduleStatus | str = ScheduleStatus.ACTIVE,
        description: Optional[str] = None,
        department_id: Optional[int] = None,
        lunch_break_minutes: int = 60,
        overtime_threshold: float = 8.0,
    ) -> int:
        require_manager(current_role)

        draft = WorkSchedule(
            schedule_id=0,
            name=require_non_empty(name, "Schedule name"),
            effective_date=effective_date,
            days=parse_week(days),
            expires_at=expires_at,
            status=self._status(status),
            description=description.strip() if description else None,
            department_id=int(department_id) if department_id else None,
            lunch_break_minutes=self._number(lunch_break_minutes, "lunch_break_minutes", int),
            overtime_threshold=self._number(overtime_threshold, "overtime_threshold"),
        )
        self._validate(draft)

        schedule_id = self._schedules.create(
            name=draft.name,
            effective_date=draft.effective_date,
            days=draft.days,
            expires_at=draft.expires_at,
            status=draft.status,
            description=draft.description,
            department_id=draft.department_id,
            lunch_break_minutes=draft.lunch_break_minutes,
            overtime_threshold=draft.overtime_threshold,
        )
        logger.info("Created schedule %s (%s, %d days)", schedule_id, draft.status.value, len(draft.days))
        return schedule_id

    def update_schedule(self, *, current_role: Role, schedule_id: int, changes: Mapping[str, Any]) -> WorkSchedule:
        """Apply the given fields; anything not in `changes` is kept."""
        require_manager(current_role)
        schedule = self.get(schedule_id)

        fields: dict[str, Any] = {}
        if "name" in changes:
            fields["name"] = require_non_empty(changes["name"] or "", "Schedule name")
        if "days" in changes:
            fields["days"] = parse_week(changes["days"])
        if "status" in changes:
            fields["status"] = self._status(changes["status"])
        if "description" in changes:
            fields["description"] = changes["description"].strip() if changes["description"] else None
        if "department_id" in changes:
            fields["department_id"] = int(changes["department_id"]) if changes["department_id"] else None
        for key in ("effective_date", "expires_at"):
            if key in changes:
                fields[key] = changes[key]
        if "lunch_break_minutes" in changes:
            fields["lunch_break_minutes"] = self._number(changes["lunch_break_minutes"], "lunch_break_minutes", int)
        if "overtime_threshold" in changes:
            fields["overtime_threshold"] = self._number(changes["overtime_threshold"], "overtime_threshold")
        if fields.get("effective_date", schedule.effective_date) is None:
            raise ValidationError("effective_date is required")

        updated = replace(schedule, **fields)
        self._validate(updated)
        if not self._schedules.save(updated):
            raise NotFoundError("Schedule not found")
        return updated

    def delete(self, *, current_role: Role, schedule_id: int) -> None:
        require_manager(current_role)
        schedule = self.get(schedule_id)
        if not self._schedules.delete(schedule_id=schedule.schedule_id):
            raise ValidationError("Failed to delete schedule")
        logger.info("Deleted schedule %s", schedule.schedule_id)
