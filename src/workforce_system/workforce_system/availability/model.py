from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Unavailability:
    """Approved leave (or other absence) blocking scheduling on [start_date, end_date]."""

    employee_id: int
    start_date: date
    end_date: date
    reason: str = "leave"

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date
