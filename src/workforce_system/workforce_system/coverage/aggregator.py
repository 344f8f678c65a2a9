"""Coverage aggregation: staffing health per day, per week and overall.

Days without any assignment are left out unless `include_empty_days` is set,
in which case every date of the period is reported (0% -> understaffed).
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Iterable, Iterator, Optional

from ..assignments.model import ShiftAssignment
from ..common.datetime_utils import iter_dates, percentage, require_range, round_half_up, week_of_month
from ..core.constants import DEFAULT_REQUIRED_STAFF_PER_DAY
from ..core.enums import CoverageStatus
from ..core.exceptions import ValidationError
from .model import CoverageDayAnalysis, CoverageReport, CoverageSummary, CoverageThresholds, CoverageTrend

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
UNKNOWN_DEPARTMENT = "Unknown"


class DailyCoverage:
    """Finite, restartable sequence of per-date analyses, recomputed on every iteration."""

    def __init__(
        self,
        assignments: Iterable[ShiftAssignment],
        required_staff_per_day: int = DEFAULT_REQUIRED_STAFF_PER_DAY,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
        *,
        thresholds: Optional[CoverageThresholds] = None,
        include_empty_days: bool = False,
    ):
        if int(required_staff_per_day) <= 0:
            raise ValidationError("Required staff per day must be positive")
        if period_start is not None and period_end is not None:
            require_range(period_start, period_end)
        if include_empty_days and (period_start is None or period_end is None):
            raise ValidationError("Listing empty days needs both period start and end")

        self._assignments = tuple(assignments)
        self.required_staff_per_day = int(required_staff_per_day)
        self.period_start = period_start
        self.period_end = period_end
        self.thresholds = thresholds or CoverageThresholds()
        self.include_empty_days = include_empty_days

    def _in_period(self, day: date) -> bool:
        if self.period_start is not None and day < self.period_start:
            return False
        return self.period_end is None or day <= self.period_end

    def __iter__(self) -> Iterator[CoverageDayAnalysis]:
        grouped: dict[date, list[ShiftAssignment]] = {}
        if self.include_empty_days:
            for day in iter_dates(self.period_start, self.period_end):
                grouped[day] = []

        for a in self._assignments:
            if a.is_cancelled or not self._in_period(a.date):
                continue
            grouped.setdefault(a.date, []).append(a)

        for day in sorted(grouped):
            yield self._analyze_day(day, grouped[day])

    def _analyze_day(self, day: date, assignments: list[ShiftAssignment]) -> CoverageDayAnalysis:
        count = len(assignments)
        coverage = percentage(count, self.required_staff_per_day)
        return CoverageDayAnalysis(
            date=day,
            day_of_week=DAY_NAMES[day.weekday()],
            assignment_count=count,
            coverage_percentage=coverage,
            department_breakdown=dict(Counter(a.department_name or UNKNOWN_DEPARTMENT for a in assignments)),
            conflict_count=sum(1 for a in assignments if a.has_conflict),
            status=self.thresholds.classify(coverage),
        )


def analyze_coverage(
    assignments: Iterable[ShiftAssignment],
    required_staff_per_day: int = DEFAULT_REQUIRED_STAFF_PER_DAY,
    period_start: Optional[date] = None,
    period_end: Optional[date] = None,
    *,
    thresholds: Optional[CoverageThresholds] = None,
    include_empty_days: bool = False,
) -> DailyCoverage:
    return DailyCoverage(
        assignments,
        required_staff_per_day,
        period_start,
        period_end,
        thresholds=thresholds,
        include_empty_days=include_empty_days,
    )


def weekly_trends(days: Iterable[CoverageDayAnalysis]) -> list[CoverageTrend]:
    """Partition by week of month (ceil(day / 7)) and average coverage over the days present."""
    buckets: dict[tuple[str, int], list[CoverageDayAnalysis]] = {}
    for day in days:
        key = (day.date.strftime("%Y-%m"), week_of_month(day.date))
        buckets.setdefault(key, []).append(day)

    trends = []
    for (month, week), members in sorted(buckets.items()):
        trends.append(
            CoverageTrend(
                month=month,
                week=week,
                average_coverage=round_half_up(sum(d.coverage_percentage for d in members), len(members)),
                total_assignments=sum(d.assignment_count for d in members),
                conflict_days=sum(1 for d in members if d.status == CoverageStatus.UNDERSTAFFED),
            )
        )
    return trends


def summarize(days: Iterable[CoverageDayAnalysis]) -> CoverageSummary:
    days = list(days)
    if not days:
        return CoverageSummary()

    statuses = Counter(d.status for d in days)
    return CoverageSummary(
        total_days=len(days),
        understaffed_days=statuses[CoverageStatus.UNDERSTAFFED],
        adequate_days=statuses[CoverageStatus.ADEQUATE],
        overstaffed_days=statuses[CoverageStatus.OVERSTAFFED],
        total_conflicts=sum(d.conflict_count for d in days),
        average_coverage=round_half_up(sum(d.coverage_percentage for d in days), len(days)),
    )


def build_coverage_report(
    assignments: Iterable[ShiftAssignment],
    required_staff_per_day: int,
    period_start: date,
    period_end: date,
    *,
    thresholds: Optional[CoverageThresholds] = None,
    include_empty_days: bool = False,
) -> CoverageReport:
    days = list(
        analyze_coverage(
            assignments,
            required_staff_per_day,
            period_start,
            period_end,
            thresholds=thresholds,
            include_empty_days=include_empty_days,
        )
    )
    return CoverageReport(
        period_start=period_start,
        period_end=period_end,
        required_staff_per_day=int(required_staff_per_day),
        days=days,
        trends=weekly_trends(days),
        summary=summarize(days),
    )
