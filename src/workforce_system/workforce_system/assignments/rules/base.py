from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ...availability.model import Unavailability
from ...rotations.model import EmployeeRotation
from ..model import ConflictResult, ShiftAssignment


@dataclass(frozen=True)
class ProposedShift:
    """Everything a rule needs to judge one proposed assignment.

    `existing` holds the employee's non-cancelled assignments only.
    """

    employee_id: int
    date: date
    start_minute: int
    end_minute: int
    existing: Sequence[ShiftAssignment]
    unavailability: Optional[Unavailability] = None
    rotation: Optional[EmployeeRotation] = None
    employee_label: str = ""

    @property
    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute


class ConflictRule(ABC):
    """Strategy Pattern: one kind of scheduling conflict."""

    @abstractmethod
    def evaluate(self, proposed: ProposedShift) -> Optional[ConflictResult]:
        """Return a conflict, or None when this rule does not apply."""

        raise NotImplementedError
