from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Mapping, Optional

from ..common.datetime_utils import shift_minutes
from ..core.enums import ScheduleStatus

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass(frozen=True)
class DayShift:
    start: time
    end: time

    @property
    def hours(self) -> float:
        return round(shift_minutes(self.start, self.end) / 60, 1)


@dataclass(frozen=True)
class WorkSchedule:
    """Standard weekly shift times for a department.

    `days` is keyed by weekday index (0 = Monday); a missing day is not worked.
    """

    schedule_id: int
    name: str
    effective_date: date
    days: Mapping[int, DayShift] = field(default_factory=dict)
    expires_at: Optional[date] = None
    status: ScheduleStatus = ScheduleStatus.ACTIVE
    description: Optional[str] = None
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    lunch_break_minutes: int = 60
    overtime_threshold: float = 8.0

    def status_on(self, day: date) -> ScheduleStatus:
        if self.status == ScheduleStatus.ACTIVE and self.expires_at is not None and day > self.expires_at:
            return ScheduleStatus.EXPIRED
        return self.status

    def applies_on(self, day: date) -> bool:
        return self.status_on(day) == ScheduleStatus.ACTIVE and day >= self.effective_date

    def shift_for(self, day: date) -> Optional[DayShift]:
        if not self.applies_on(day):
            return None
        return self.days.get(day.weekday())

    @property
    def weekly_hours(self) -> float:
        return round(sum(s.hours for s in self.days.values()), 1)


@dataclass(frozen=True)
class ScheduleSummary:
    total_schedules: int = 0
    active_schedules: int = 0
    expired_schedules: int = 0
    draft_schedules: int = 0
