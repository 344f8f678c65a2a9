from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import ScheduleStatus
from .model import DayShift, WorkSchedule


class ScheduleRepository(Protocol):
    def list_all(self, *, department_id: Optional[int] = None) -> Sequence[WorkSchedule]:
        raise NotImplementedError

    def get_by_id(self, schedule_id: int) -> Optional[WorkSchedule]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        effective_date: date,
        days: Mapping[int, DayShift],
        expires_at: Optional[date] = None,
        status: ScheduleStatus = ScheduleStatus.ACTIVE,
        description: Optional[str] = None,
        department_id: Optional[int] = None,
        lunch_break_minutes: int = 60,
        overtime_threshold: float = 8.0,
    ) -> int:
        """Returns schedule_id."""

        raise NotImplementedError

    def save(self, schedule: WorkSchedule) -> bool:
        raise NotImplementedError

    def delete(self, *, schedule_id: int) -> bool:
        raise NotImplementedError
