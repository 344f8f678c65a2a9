from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any, FrozenSet, Mapping, Optional, Tuple

from ..core.enums import RotationPatternType
from ..core.exceptions import InvalidPatternError


def normalize_flags(flags) -> Tuple[int, ...]:
    """Validate a work/rest sequence and return it as a tuple of ints."""
    if flags is None or isinstance(flags, (str, bytes)) or not isinstance(flags, Sequence):
        raise InvalidPatternError("Rotation pattern must be a finite sequence of 0/1 flags")
    if len(flags) == 0:
        raise InvalidPatternError("Rotation pattern cannot be empty")

    out = []
    for idx, flag in enumerate(flags):
        if isinstance(flag, bool) or flag not in (0, 1):
            raise InvalidPatternError(f"Invalid value {flag!r} at position {idx}: only 0 and 1 are allowed")
        out.append(int(flag))
    return tuple(out)


@dataclass(frozen=True)
class RotationPattern:
    """Cyclic work/rest template: one flag per day of the cycle (1 = work, 0 = rest)."""

    work_days: int
    rest_days: int
    pattern: Tuple[int, ...]
    cycle_length: int
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.pattern:
            raise InvalidPatternError("Rotation pattern cannot be empty")
        if len(self.pattern) != self.cycle_length:
            raise InvalidPatternError(
                f"Pattern length {len(self.pattern)} does not match cycle length {self.cycle_length}"
            )
        if self.pattern.count(1) != self.work_days:
            raise InvalidPatternError(f"Pattern does not contain {self.work_days} work days")
        if self.pattern.count(0) != self.rest_days:
            raise InvalidPatternError(f"Pattern does not contain {self.rest_days} rest days")

    def flag_at(self, offset: int) -> int:
        return self.pattern[offset % self.cycle_length]

    def to_json(self) -> dict:
        data: dict[str, Any] = {
            "work_days": self.work_days,
            "rest_days": self.rest_days,
            "pattern": list(self.pattern),
            "cycle_length": self.cycle_length,
        }
        if self.description:
            data["description"] = self.description
        return data

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "RotationPattern":
        """Rebuild a stored pattern document, enforcing the same invariants as the builder."""
        try:
            flags = normalize_flags(data["pattern"])
            work_days = int(data.get("work_days", flags.count(1)))
            rest_days = int(data.get("rest_days", flags.count(0)))
            cycle_length = int(data.get("cycle_length") or len(flags))
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidPatternError(f"Malformed rotation pattern document: {e}")

        return cls(
            work_days=work_days,
            rest_days=rest_days,
            pattern=flags,
            cycle_length=cycle_length,
            description=data.get("description") or None,
        )


@dataclass(frozen=True)
class EmployeeRotation:
    """A named rotation binding a pattern to a set of employees.

    `start_date` is the anchor date the cycle is indexed from.
    """

    rotation_id: int
    name: str
    pattern_type: RotationPatternType
    pattern: RotationPattern
    start_date: date
    end_date: Optional[date] = None
    department_id: Optional[int] = None
    description: Optional[str] = None
    is_active: bool = True
    employee_ids: FrozenSet[int] = field(default_factory=frozenset)

    def applies_on(self, day: date) -> bool:
        if not self.is_active or day < self.start_date:
            return False
        return self.end_date is None or day <= self.end_date


@dataclass(frozen=True)
class RotationDay:
    date: date
    is_work_day: bool


@dataclass(frozen=True)
class RotationCoverage:
    work_days: int
    rest_days: int
    coverage_percentage: int
