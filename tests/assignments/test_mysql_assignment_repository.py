from __future__ import annotations

from datetime import date, time

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from src.workforce_system.workforce_system.assignments.model import ShiftAssignment
from src.workforce_system.workforce_system.assignments.mysql_assignment_repository import MySQLAssignmentRepository
from src.workforce_system.workforce_system.core.enums import ShiftType
from src.workforce_system.workforce_system.core.exceptions import ValidationError


class FakeCursor:
    def __init__(self, error):
        self.error = error
        self.closed = False

    def execute(self, sql, params=None):
        raise self.error

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, error):
        self.cur = FakeCursor(error)
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self.cur

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, error):
        self.conn = FakeConnection(error)

    def connect(self):
        return self.conn


def _duplicate():
    return IntegrityError(msg="Duplicate entry for key 'uq_assignment_employee_slot'", errno=errorcode.ER_DUP_ENTRY)


def test_duplicate_slot_on_create_is_a_validation_error():
    factory = FakeConnFactory(_duplicate())
    repo = MySQLAssignmentRepository(factory)

    with pytest.raises(ValidationError, match="already has a shift"):
        repo.create(
            employee_id=1,
            work_date=date(2025, 10, 6),
            shift_start=time(8),
            shift_end=time(16),
            shift_type=ShiftType.MORNING,
        )

    assert factory.conn.rolled_back is True
    assert factory.conn.committed is False
    assert factory.conn.closed is True


def test_duplicate_slot_on_save_is_a_validation_error():
    repo = MySQLAssignmentRepository(FakeConnFactory(_duplicate()))
    assignment = ShiftAssignment(assignment_id=3, employee_id=1, date=date(2025, 10, 6), shift_start=time(8), shift_end=time(16))

    with pytest.raises(ValidationError):
        repo.save(assignment)


def test_other_integrity_errors_propagate():
    error = IntegrityError(msg="Cannot add or update a child row", errno=errorcode.ER_NO_REFERENCED_ROW_2)
    repo = MySQLAssignmentRepository(FakeConnFactory(error))

    with pytest.raises(IntegrityError):
        repo.create(
            employee_id=999,
            work_date=date(2025, 10, 6),
            shift_start=time(8),
            shift_end=time(16),
            shift_type=ShiftType.MORNING,
        )
