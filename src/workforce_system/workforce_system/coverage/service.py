from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from ..assignments.service import AssignmentService
from ..common.datetime_utils import require_range
from ..core.constants import DEFAULT_REQUIRED_STAFF_PER_DAY
from ..departments.repository import DepartmentRepository
from .aggregator import build_coverage_report
from .model import CoverageReport, CoverageThresholds

logger = logging.getLogger(__name__)


class CoverageService:
    def __init__(
        self,
        assignments: AssignmentService,
        departments: Optional[DepartmentRepository] = None,
        *,
        required_staff_per_day: int = DEFAULT_REQUIRED_STAFF_PER_DAY,
        thresholds: Optional[CoverageThresholds] = None,
    ):
        self._assignments = assignments
        self._departments = departments
        self._required_staff_per_day = int(required_staff_per_day)
        self._thresholds = thresholds or CoverageThresholds()

    def _department_names(self) -> dict[int, str]:
        if not self._departments:
            return {}
        return {d.dept_id: d.dept_name for d in self._departments.list_all()}

    def build_report(
        self,
        *,
        start: date,
        end: date,
        department_id: Optional[int] = None,
        required_staff_per_day: Optional[int] = None,
        include_empty_days: bool = False,
    ) -> CoverageReport:
        require_range(start, end)
        assignments = self._assignments.list_assignments(start=start, end=end, department_id=department_id)

        names = self._department_names()
        if names:
            assignments = [
                a if a.department_name or a.department_id not in names else replace(a, department_name=names[a.department_id])
                for a in assignments
            ]

        report = build_coverage_report(
            assignments,
            self._required_staff_per_day if required_staff_per_day is None else required_staff_per_day,
            start,
            end,
            thresholds=self._thresholds,
            include_empty_days=include_empty_days,
        )
        logger.debug(
            "Coverage %s..%s: %d days, %d understaffed",
            start.isoformat(),
            end.isoformat(),
            report.summary.total_days,
            report.summary.understaffed_days,
        )
        return report
