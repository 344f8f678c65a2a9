from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import Unavailability


class AvailabilityRepository(Protocol):
    def get_unavailability(self, *, employee_id: int, work_date: date) -> Optional[Unavailability]:
        """Return the absence covering `work_date`, if any."""

        raise NotImplementedError
