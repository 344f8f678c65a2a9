"""Example: the scheduling engine used directly, without Flask or MySQL."""

from datetime import date, time

from src.workforce_system.workforce_system.assignments.detector import detect_conflicts
from src.workforce_system.workforce_system.assignments.model import ShiftAssignment
from src.workforce_system.workforce_system.coverage.aggregator import build_coverage_report
from src.workforce_system.workforce_system.coverage.export import export_csv
from src.workforce_system.workforce_system.rotations.engine import build_pattern, coverage_stats, project_range


def main():
    anchor = date(2026, 1, 5)
    pattern = build_pattern("4x2")
    for day in project_range(pattern, anchor, anchor, date(2026, 1, 12)):
        print(day.date.isoformat(), "work" if day.is_work_day else "rest")
    print(coverage_stats(pattern, anchor, date(2026, 1, 1), date(2026, 1, 31)))

    existing = [
        ShiftAssignment(assignment_id=1, employee_id=7, date=anchor, shift_start=time(8), shift_end=time(16)),
    ]
    print(detect_conflicts(7, anchor, "15:00", "23:00", existing).to_dict())

    report = build_coverage_report(existing, 5, anchor, date(2026, 1, 11), include_empty_days=True)
    print(export_csv(report.days))


if __name__ == "__main__":
    main()
