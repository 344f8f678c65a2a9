from __future__ import annotations

from datetime import date
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_date
from .model import Unavailability
from .repository import AvailabilityRepository

APPROVED = "APPROVED"


class MySQLAvailabilityRepository(AvailabilityRepository):
    """Reads approved leave requests owned by the leave system."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_unavailability(self, *, employee_id: int, work_date: date) -> Optional[Unavailability]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, start_date, end_date, leave_type
                FROM leave_requests
                WHERE employee_id=%s AND status=%s AND start_date<=%s AND end_date>=%s
                ORDER BY start_date
                LIMIT 1
                """,
                (int(employee_id), APPROVED, work_date, work_date),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Unavailability(
                employee_id=int(r["employee_id"]),
                start_date=normalize_mysql_date(r["start_date"]),
                end_date=normalize_mysql_date(r["end_date"]),
                reason=r.get("leave_type") or "leave",
            )
