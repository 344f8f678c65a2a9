from __future__ import annotations

import json
from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import RotationPatternType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, load_json_column, normalize_mysql_date
from .model import EmployeeRotation, RotationPattern
from .repository import RotationRepository

_SELECT = """
    SELECT r.rotation_id, r.name, r.description, r.pattern_type, r.pattern_json,
           r.department_id, r.start_date, r.end_date, r.is_active
    FROM rotations r
"""


class MySQLRotationRepository(RotationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _employee_ids(self, cur, rotation_ids: Sequence[int]) -> dict[int, set[int]]:
        out: dict[int, set[int]] = {rid: set() for rid in rotation_ids}
        if not rotation_ids:
            return out
        cur.execute(
            f"SELECT rotation_id, employee_id FROM rotation_employees WHERE rotation_id IN ({in_clause(rotation_ids)})",
            tuple(rotation_ids),
        )
        for r in fetchall(cur):
            out[int(r["rotation_id"])].add(int(r["employee_id"]))
        return out

    @staticmethod
    def _to_model(r: dict, employee_ids: set[int]) -> EmployeeRotation:
        return EmployeeRotation(
            rotation_id=int(r["rotation_id"]),
            name=r["name"],
            pattern_type=RotationPatternType(r["pattern_type"]),
            pattern=RotationPattern.from_json(load_json_column(r["pattern_json"])),
            start_date=normalize_mysql_date(r["start_date"]),
            end_date=normalize_mysql_date(r.get("end_date")),
            department_id=int(r["department_id"]) if r.get("department_id") is not None else None,
            description=r.get("description"),
            is_active=bool(r["is_active"]),
            employee_ids=frozenset(employee_ids),
        )

    def list_all(self, *, active_only: bool = False) -> Sequence[EmployeeRotation]:
        where = "WHERE r.is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} {where} ORDER BY r.rotation_id")
            rows = fetchall(cur)
            members = self._employee_ids(cur, [int(r["rotation_id"]) for r in rows])
            return [self._to_model(r, members[int(r["rotation_id"])]) for r in rows]

    def get_by_id(self, rotation_id: int) -> Optional[EmployeeRotation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE r.rotation_id=%s", (int(rotation_id),))
            r = fetchone(cur)
            if not r:
                return None
            members = self._employee_ids(cur, [int(r["rotation_id"])])
            return self._to_model(r, members[int(r["rotation_id"])])

    def get_active_for_employee(self, employee_id: int) -> Optional[EmployeeRotation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                JOIN rotation_employees re ON re.rotation_id = r.rotation_id
                WHERE re.employee_id=%s AND r.is_active=1
                ORDER BY r.start_date DESC
                LIMIT 1
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            members = self._employee_ids(cur, [int(r["rotation_id"])])
            return self._to_model(r, members[int(r["rotation_id"])])

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO rotations(name, description, pattern_type, pattern_json, department_id, start_date, end_date, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (name, description, pattern_type.value, json.dumps(pattern.to_json()), department_id, start_date, end_date),
            )
            return int(cur.lastrowid)

    def replace_pattern(self, *, rotation_id: int, pattern_type: RotationPatternType, pattern: RotationPattern) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE rotations SET pattern_type=%s, pattern_json=%s WHERE rotation_id=%s",
                (pattern_type.value, json.dumps(pattern.to_json()), int(rotation_id)),
            )
            return cur.rowcount > 0

    def deactivate(self, *, rotation_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE rotations SET is_active=0 WHERE rotation_id=%s", (int(rotation_id),))
            return cur.rowcount > 0

    def assign_employees(self, *, rotation_id: int, employee_ids: Iterable[int]) -> int:
        ids = sorted({int(e) for e in employee_ids})
        if not ids:
            return 0

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                DELETE re FROM rotation_employees re
                JOIN rotations r ON r.rotation_id = re.rotation_id
                WHERE r.is_active=1 AND re.rotation_id<>%s AND re.employee_id IN ({in_clause(ids)})
                """,
                (int(rotation_id), *ids),
            )
            cur.executemany(
                "INSERT IGNORE INTO rotation_employees(rotation_id, employee_id) VALUES(%s,%s)",
                [(int(rotation_id), e) for e in ids],
            )
            return len(ids)
