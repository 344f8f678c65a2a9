from __future__ import annotations

from datetime import date, time

import pytest

from src.workforce_system.workforce_system.assignments.model import ShiftAssignment
from src.workforce_system.workforce_system.core.enums import CoverageStatus
from src.workforce_system.workforce_system.core.exceptions import ValidationError
from src.workforce_system.workforce_system.coverage.service import CoverageService
from src.workforce_system.workforce_system.departments.model import Department


class FakeAssignmentService:
    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    def list_assignments(self, *, start, end, employee_id=None, department_id=None, recompute_conflicts=True):
        self.calls.append(department_id)
        return [
            a
            for a in self.rows
            if start <= a.date <= end and (department_id is None or a.department_id == department_id)
        ]


class FakeDepartments:
    def list_all(self):
        return [Department(dept_id=1, dept_name="Operations"), Department(dept_id=2, dept_name="Support")]

    def get_by_id(self, dept_id):
        return None


def _row(i, dept_id, day=date(2025, 10, 6)):
    return ShiftAssignment(
        assignment_id=i, employee_id=i, date=day, shift_start=time(8), shift_end=time(16), department_id=dept_id
    )


def test_report_fills_department_names():
    assignments = FakeAssignmentService([_row(1, 1), _row(2, 2), _row(3, 2), _row(4, None)])
    service = CoverageService(assignments, FakeDepartments(), required_staff_per_day=4)

    report = service.build_report(start=date(2025, 10, 1), end=date(2025, 10, 31))

    [day] = report.days
    assert dict(day.department_breakdown) == {"Operations": 1, "Support": 2, "Unknown": 1}
    assert day.status == CoverageStatus.OVERSTAFFED


def test_report_filters_by_department_and_overrides_target():
    assignments = FakeAssignmentService([_row(1, 1), _row(2, 2), _row(3, 2)])
    service = CoverageService(assignments, FakeDepartments())

    report = service.build_report(start=date(2025, 10, 1), end=date(2025, 10, 31), department_id=2, required_staff_per_day=2)

    assert assignments.calls == [2]
    assert report.required_staff_per_day == 2
    assert report.days[0].coverage_percentage == 100


def test_report_can_list_empty_days():
    service = CoverageService(FakeAssignmentService([]))
    report = service.build_report(start=date(2025, 10, 1), end=date(2025, 10, 7), include_empty_days=True)

    assert report.summary.total_days == 7
    assert report.summary.understaffed_days == 7
    assert [(t.month, t.week) for t in report.trends] == [("2025-10", 1)]


def test_explicit_zero_target_is_rejected_not_defaulted():
    service = CoverageService(FakeAssignmentService([_row(1, 1)]), FakeDepartments())

    with pytest.raises(ValidationError):
        service.build_report(start=date(2025, 10, 1), end=date(2025, 10, 31), required_staff_per_day=0)
