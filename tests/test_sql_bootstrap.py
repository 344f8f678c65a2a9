from __future__ import annotations

from pathlib import Path

from src.workforce_system.workforce_system.database.bootstrap import iter_sql_statements

DATABASE_DIR = Path(__file__).resolve().parents[1] / "database"


def test_semicolons_inside_quotes_do_not_split():
    sql = "INSERT INTO t VALUES('a;b'); INSERT INTO t VALUES(\"c;d\");\nSELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES('a;b')",
        'INSERT INTO t VALUES("c;d")',
        "SELECT 1",
    ]


def test_schema_declares_every_table():
    statements = list(iter_sql_statements((DATABASE_DIR / "schema.sql").read_text(encoding="utf-8")))
    tables = [s.split("EXISTS", 1)[1].split("(", 1)[0].strip() for s in statements if "CREATE TABLE" in s]

    assert tables == ["departments", "employees", "rotations", "rotation_employees", "work_schedules", "shift_assignments", "leave_requests"]
