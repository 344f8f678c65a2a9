from __future__ import annotations

from typing import Optional

from ...common.datetime_utils import week_bounds
from ...core.constants import DEFAULT_DAILY_HOUR_CAP, DEFAULT_WEEKLY_HOUR_CAP
from ...core.enums import ConflictSeverity, ConflictType
from ..model import ConflictResult
from .base import ConflictRule, ProposedShift


def _hours(minutes: int) -> str:
    return f"{minutes / 60:g}h"


class HoursRule(ConflictRule):
    """Weekly (Mon-Sun) scheduled hours above the weekly cap, or one shift longer than the daily cap.

    A shift's full duration counts towards the date it starts on. The daily
    cap bounds a single shift so back-to-back shifts stay allowed.
    """

    def __init__(self, *, weekly_hour_cap: float = DEFAULT_WEEKLY_HOUR_CAP, daily_hour_cap: float = DEFAULT_DAILY_HOUR_CAP):
        self.weekly_cap_minutes = int(round(float(weekly_hour_cap) * 60))
        self.daily_cap_minutes = int(round(float(daily_hour_cap) * 60))

    def evaluate(self, proposed: ProposedShift) -> Optional[ConflictResult]:
        monday, sunday = week_bounds(proposed.date)

        weekly = proposed.duration_minutes + sum(
            e.duration_minutes for e in proposed.existing if monday <= e.date <= sunday
        )

        if weekly > self.weekly_cap_minutes:
            message = (
                f"{proposed.employee_label} would be scheduled {_hours(weekly)} in the week of "
                f"{monday.isoformat()} (limit {_hours(self.weekly_cap_minutes)})"
            )
        elif proposed.duration_minutes > self.daily_cap_minutes:
            message = (
                f"{_hours(proposed.duration_minutes)} shift for {proposed.employee_label} on "
                f"{proposed.date.isoformat()} exceeds the daily limit of {_hours(self.daily_cap_minutes)}"
            )
        else:
            return None

        return ConflictResult(
            type=ConflictType.EXCEEDED_HOURS,
            severity=ConflictSeverity.WARNING,
            message=message,
            resolution="Shorten the shift or assign another employee",
        )
