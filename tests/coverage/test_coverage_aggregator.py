from __future__ import annotations

from datetime import date, time, timedelta

import pytest

from src.workforce_system.workforce_system.assignments.model import ShiftAssignment
from src.workforce_system.workforce_system.core.enums import AssignmentStatus, CoverageStatus
from src.workforce_system.workforce_system.core.exceptions import InvalidRangeError, ValidationError
from src.workforce_system.workforce_system.coverage.aggregator import (
    analyze_coverage,
    build_coverage_report,
    summarize,
    weekly_trends,
)
from src.workforce_system.workforce_system.coverage.model import CoverageThresholds

START = date(2025, 10, 1)


def staffed(day, count, *, department="Operations", conflicts=0, first_id=1, status=AssignmentStatus.SCHEDULED):
    return [
        ShiftAssignment(
            assignment_id=first_id + i,
            employee_id=first_id + i,
            date=day,
            shift_start=time(8),
            shift_end=time(16),
            status=status,
            department_name=department,
            has_conflict=i < conflicts,
        )
        for i in range(count)
    ]


@pytest.mark.parametrize(
    "count, coverage, status",
    [
        (5, 100, CoverageStatus.OVERSTAFFED),
        (6, 120, CoverageStatus.OVERSTAFFED),
        (4, 80, CoverageStatus.ADEQUATE),
        (3, 60, CoverageStatus.UNDERSTAFFED),
        (1, 20, CoverageStatus.UNDERSTAFFED),
    ],
)
def test_day_classification_boundaries(count, coverage, status):
    [day] = list(analyze_coverage(staffed(START, count), 5))

    assert day.assignment_count == count
    assert day.coverage_percentage == coverage
    assert day.status == status


def test_coverage_rounds_to_nearest_percent():
    [day] = list(analyze_coverage(staffed(START, 2), 3))
    assert day.coverage_percentage == 67


def test_days_without_assignments_are_omitted_and_sorted():
    rows = staffed(START + timedelta(days=2), 2) + staffed(START, 1, first_id=10)
    days = list(analyze_coverage(rows, 5, START, START + timedelta(days=6)))

    assert [d.date for d in days] == [START, START + timedelta(days=2)]


def test_include_empty_days_reports_every_date():
    days = list(analyze_coverage(staffed(START, 5), 5, START, START + timedelta(days=2), include_empty_days=True))

    assert [d.assignment_count for d in days] == [5, 0, 0]
    assert [d.status for d in days] == [CoverageStatus.OVERSTAFFED, CoverageStatus.UNDERSTAFFED, CoverageStatus.UNDERSTAFFED]


def test_include_empty_days_needs_a_period():
    with pytest.raises(ValidationError):
        analyze_coverage([], 5, START, None, include_empty_days=True)


def test_assignments_outside_period_and_cancelled_are_dropped():
    rows = (
        staffed(START - timedelta(days=1), 3)
        + staffed(START, 2, first_id=10)
        + staffed(START, 2, first_id=20, status=AssignmentStatus.CANCELLED)
    )
    days = list(analyze_coverage(rows, 5, START, START))

    assert len(days) == 1
    assert days[0].assignment_count == 2


def test_department_breakdown_and_conflicts():
    rows = staffed(START, 2, department="Operations", conflicts=1) + staffed(START, 1, department=None, first_id=10)
    [day] = list(analyze_coverage(rows, 5))

    assert dict(day.department_breakdown) == {"Operations": 2, "Unknown": 1}
    assert day.conflict_count == 1
    assert day.day_of_week == "Wed"


def test_analysis_is_restartable():
    analysis = analyze_coverage(staffed(START, 3), 5)
    assert list(analysis) == list(analysis)


def test_invalid_inputs_raise():
    with pytest.raises(ValidationError):
        analyze_coverage([], 0)
    with pytest.raises(InvalidRangeError):
        analyze_coverage([], 5, START, START - timedelta(days=1))


def test_custom_thresholds():
    thresholds = CoverageThresholds(adequate=50, overstaffed=150)
    [day] = list(analyze_coverage(staffed(START, 3), 5, thresholds=thresholds))

    assert day.status == CoverageStatus.ADEQUATE


def test_weekly_trends_group_by_week_of_month():
    rows = (
        staffed(date(2025, 10, 1), 5)
        + staffed(date(2025, 10, 7), 3, first_id=10)
        + staffed(date(2025, 10, 8), 4, first_id=20)
        + staffed(date(2025, 11, 2), 2, first_id=30)
    )
    trends = weekly_trends(analyze_coverage(rows, 5))

    assert [(t.month, t.week) for t in trends] == [("2025-10", 1), ("2025-10", 2), ("2025-11", 1)]
    assert trends[0].average_coverage == 80
    assert trends[0].total_assignments == 8
    assert trends[0].conflict_days == 1
    assert trends[1].average_coverage == 80
    assert trends[1].conflict_days == 0
    assert trends[2].conflict_days == 1


def test_summary_counts_statuses():
    rows = staffed(START, 5) + staffed(START + timedelta(days=1), 4, first_id=10, conflicts=2) + staffed(START + timedelta(days=2), 1, first_id=20)
    summary = summarize(analyze_coverage(rows, 5))

    assert summary.total_days == 3
    assert (summary.overstaffed_days, summary.adequate_days, summary.understaffed_days) == (1, 1, 1)
    assert summary.total_conflicts == 2
    assert summary.average_coverage == 67


def test_summary_of_nothing_is_zeroed():
    summary = summarize([])
    assert summary.total_days == 0
    assert summary.average_coverage == 0


def test_build_coverage_report():
    report = build_coverage_report(staffed(START, 4), 5, START, START + timedelta(days=6))

    assert report.required_staff_per_day == 5
    assert len(report.days) == 1
    assert report.summary.adequate_days == 1
    assert report.trends[0].total_assignments == 4
