from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Sequence

from ..core.enums import ScheduleStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date, normalize_mysql_time
from .model import WEEKDAYS, DayShift, WorkSchedule
from .repository import ScheduleRepository

_DAY_COLUMNS = [f"{day}_{edge}" for day in WEEKDAYS for edge in ("start", "end")]

_COLUMNS = [
    "name", "description", "effective_date", "expires_at", "status",
    "department_id", "lunch_break_minutes", "overtime_threshold", *_DAY_COLUMNS,
]

_SELECT = f"""
    SELECT s.schedule_id, s.name, s.description, s.effective_date, s.expires_at, s.status,
           s.department_id, d.dept_name AS department_name, s.lunch_break_minutes, s.overtime_threshold,
           {", ".join("s." + c for c in _DAY_COLUMNS)}
    FROM work_schedules s
    LEFT JOIN departments d ON d.dept_id = s.department_id
"""


def _day_values(days: Mapping[int, DayShift]) -> list:
    values = []
    for index in range(len(WEEKDAYS)):
        shift = days.get(index)
        values.extend([shift.start, shift.end] if shift else [None, None])
    return values


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_model(r: dict) -> WorkSchedule:
        days = {}
        for index, day in enumerate(WEEKDAYS):
            start = normalize_mysql_time(r.get(f"{day}_start"))
            end = normalize_mysql_time(r.get(f"{day}_end"))
            if start is not None and end is not None:
                days[index] = DayShift(start=start, end=end)

        return WorkSchedule(
            schedule_id=int(r["schedule_id"]),
            name=r["name"],
            effective_date=normalize_mysql_date(r["effective_date"]),
            days=days,
            expires_at=normalize_mysql_date(r.get("expires_at")),
            status=ScheduleStatus(r["status"]),
            description=r.get("description"),
            department_id=int(r["department_id"]) if r.get("department_id") is not None else None,
            department_name=r.get("department_name"),
            lunch_break_minutes=int(r.get("lunch_break_minutes") or 0),
            overtime_threshold=float(r["overtime_threshold"]),
        )

    def list_all(self, *, department_id: Optional[int] = None) -> Sequence[WorkSchedule]:
        sql = _SELECT
        params: list = []
        if department_id is not None:
            sql += " WHERE s.department_id=%s"
            params.append(int(department_id))
        sql += " ORDER BY s.effective_date DESC, s.schedule_id DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [self._to_model(r) for r in fetchall(cur)]

    def get_by_id(self, schedule_id: int) -> Optional[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE s.schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return self._to_model(r) if r else None

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
        values = [
            name, description, effective_date, expires_at, status.value,
            department_id, lunch_break_minutes, overtime_threshold, *_day_values(days),
        ]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO work_schedules({', '.join(_COLUMNS)}) VALUES({', '.join(['%s'] * len(_COLUMNS))})",
                tuple(values),
            )
            return int(cur.lastrowid)

    def save(self, schedule: WorkSchedule) -> bool:
        values = [
            schedule.name, schedule.description, schedule.effective_date, schedule.expires_at,
            schedule.status.value, schedule.department_id, schedule.lunch_break_minutes,
            schedule.overtime_threshold, *_day_values(schedule.days),
        ]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE work_schedules SET {', '.join(c + '=%s' for c in _COLUMNS)} WHERE schedule_id=%s",
                (*values, int(schedule.schedule_id)),
            )
            cur.execute("SELECT 1 AS found FROM work_schedules WHERE schedule_id=%s", (int(schedule.schedule_id),))
            return fetchone(cur) is not None

    def delete(self, *, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM work_schedules WHERE schedule_id=%s", (int(schedule_id),))
            return cur.rowcount > 0
