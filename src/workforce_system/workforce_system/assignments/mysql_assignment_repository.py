from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..core.enums import AssignmentStatus, ShiftType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, duplicate_key_as_validation, fetchall, fetchone, normalize_mysql_date, normalize_mysql_time
from .model import ShiftAssignment
from .repository import AssignmentRepository

_SELECT = """
    SELECT a.assignment_id, a.employee_id, e.full_name, a.work_date, a.shift_start, a.shift_end,
           a.shift_type, a.status, a.is_overtime, a.overtime_hours, a.department_id, d.dept_name,
           a.location, a.notes, a.has_conflict, a.conflict_reason
    FROM shift_assignments a
    LEFT JOIN employees e ON e.employee_id = a.employee_id
    LEFT JOIN departments d ON d.dept_id = a.department_id
"""

_DUPLICATE_SLOT = "Employee already has a shift starting at that time on that date"


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_model(r: dict) -> ShiftAssignment:
        return ShiftAssignment(
            assignment_id=int(r["assignment_id"]),
            employee_id=int(r["employee_id"]),
            employee_name=r.get("full_name"),
            date=normalize_mysql_date(r["work_date"]),
            shift_start=normalize_mysql_time(r["shift_start"]),
            shift_end=normalize_mysql_time(r["shift_end"]),
            shift_type=ShiftType(r.get("shift_type") or ShiftType.CUSTOM.value),
            status=AssignmentStatus(r["status"]),
            is_overtime=bool(r.get("is_overtime")),
            overtime_hours=float(r["overtime_hours"]) if r.get("overtime_hours") is not None else None,
            department_id=int(r["department_id"]) if r.get("department_id") is not None else None,
            department_name=r.get("dept_name"),
            location=r.get("location"),
            notes=r.get("notes"),
            has_conflict=bool(r.get("has_conflict")),
            conflict_reason=r.get("conflict_reason"),
        )

    def get_by_id(self, assignment_id: int) -> Optional[ShiftAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE a.assignment_id=%s", (int(assignment_id),))
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def list_range(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
        department_id: Optional[int] = None,
    ) -> Sequence[ShiftAssignment]:
        clauses = ["a.work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if employee_id is not None:
            clauses.append("a.employee_id=%s")
            params.append(int(employee_id))
        if department_id is not None:
            clauses.append("a.department_id=%s")
            params.append(int(department_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY a.work_date ASC, a.shift_start ASC, a.employee_id ASC",
                tuple(params),
            )
            return [self._to_model(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        employee_id: int,
        work_date: date,
        shift_start: time,
        shift_end: time,
        shift_type: ShiftType,
        department_id: Optional[int] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
        is_overtime: bool = False,
        overtime_hours: Optional[float] = None,
        has_conflict: bool = False,
        conflict_reason: Optional[str] = None,
    ) -> int:
        with duplicate_key_as_validation(_DUPLICATE_SLOT), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_assignments(
                    employee_id, work_date, shift_start, shift_end, shift_type, status,
                    is_overtime, overtime_hours, department_id, location, notes, has_conflict, conflict_reason
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    work_date,
                    shift_start,
                    shift_end,
                    shift_type.value,
                    AssignmentStatus.SCHEDULED.value,
                    int(bool(is_overtime)),
                    overtime_hours,
                    department_id,
                    location,
                    notes,
                    int(bool(has_conflict)),
                    conflict_reason,
                ),
            )
            return int(cur.lastrowid)

    def save(self, assignment: ShiftAssignment) -> bool:
        with duplicate_key_as_validation(_DUPLICATE_SLOT), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shift_assignments
                SET employee_id=%s, work_date=%s, shift_start=%s, shift_end=%s, shift_type=%s, status=%s,
                    is_overtime=%s, overtime_hours=%s, department_id=%s, location=%s, notes=%s,
                    has_conflict=%s, conflict_reason=%s
                WHERE assignment_id=%s
                """,
                (
                    assignment.employee_id,
                    assignment.date,
                    assignment.shift_start,
                    assignment.shift_end,
                    assignment.shift_type.value,
                    assignment.status.value,
                    int(assignment.is_overtime),
                    assignment.overtime_hours,
                    assignment.department_id,
                    assignment.location,
                    assignment.notes,
                    int(assignment.has_conflict),
                    assignment.conflict_reason,
                    assignment.assignment_id,
                ),
            )
            # rowcount is 0 when nothing changed, so check existence instead.
            cur.execute("SELECT 1 AS found FROM shift_assignments WHERE assignment_id=%s", (assignment.assignment_id,))
            return fetchone(cur) is not None

    def set_status(self, *, assignment_id: int, status: AssignmentStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE shift_assignments SET status=%s WHERE assignment_id=%s",
                (status.value, int(assignment_id)),
            )
            return cur.rowcount > 0

    def set_overtime(self, *, assignment_id: int, is_overtime: bool, overtime_hours: Optional[float]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE shift_assignments SET is_overtime=%s, overtime_hours=%s WHERE assignment_id=%s",
                (int(bool(is_overtime)), overtime_hours, int(assignment_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, assignment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM shift_assignments WHERE assignment_id=%s", (int(assignment_id),))
            return cur.rowcount > 0
