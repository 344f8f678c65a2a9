from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping

from ..core.constants import COVERAGE_ADEQUATE_THRESHOLD, COVERAGE_OVERSTAFFED_THRESHOLD
from ..core.enums import CoverageStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class CoverageThresholds:
    """`>= overstaffed` is overstaffed, `[adequate, overstaffed)` adequate, below that understaffed."""

    adequate: int = COVERAGE_ADEQUATE_THRESHOLD
    overstaffed: int = COVERAGE_OVERSTAFFED_THRESHOLD

    def __post_init__(self) -> None:
        if not 0 <= self.adequate <= self.overstaffed:
            raise ValidationError("Coverage thresholds must satisfy 0 <= adequate <= overstaffed")

    def classify(self, coverage_percentage: int) -> CoverageStatus:
        if coverage_percentage >= self.overstaffed:
            return CoverageStatus.OVERSTAFFED
        if coverage_percentage >= self.adequate:
            return CoverageStatus.ADEQUATE
        return CoverageStatus.UNDERSTAFFED


@dataclass(frozen=True)
class CoverageDayAnalysis:
    date: date
    day_of_week: str
    assignment_count: int
    coverage_percentage: int
    department_breakdown: Mapping[str, int]
    conflict_count: int
    status: CoverageStatus


@dataclass(frozen=True)
class CoverageTrend:
    """Week-of-month rollup (week 1 = days 1-7 of `month`)."""

    month: str
    week: int
    average_coverage: int
    total_assignments: int
    conflict_days: int


@dataclass(frozen=True)
class CoverageSummary:
    total_days: int = 0
    understaffed_days: int = 0
    adequate_days: int = 0
    overstaffed_days: int = 0
    total_conflicts: int = 0
    average_coverage: int = 0


@dataclass(frozen=True)
class CoverageReport:
    period_start: date
    period_end: date
    required_staff_per_day: int
    days: list[CoverageDayAnalysis] = field(default_factory=list)
    trends: list[CoverageTrend] = field(default_factory=list)
    summary: CoverageSummary = field(default_factory=CoverageSummary)
