"""Rotation pattern engine.

Builds cyclic work/rest patterns and projects them onto calendar dates.
Every function here is pure: the result depends only on the arguments.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta
from typing import Iterator, Optional, Tuple, Union

from ..common.datetime_utils import days_between, percentage, require_range
from ..core.enums import RotationPatternType
from ..core.exceptions import InvalidPatternError
from .model import RotationCoverage, RotationDay, RotationPattern, normalize_flags

PRESET_PATTERNS: dict[RotationPatternType, Tuple[int, ...]] = {
    RotationPatternType.FOUR_BY_TWO: (1, 1, 1, 1, 0, 0),
    RotationPatternType.FIVE_BY_TWO: (1, 1, 1, 1, 1, 0, 0),
    RotationPatternType.SIX_BY_ONE: (1, 1, 1, 1, 1, 1, 0),
}

# Builder templates; the ones without a pattern type are built as custom patterns.
PRESET_TEMPLATES: dict[str, Tuple[int, ...]] = {
    **{kind.value: flags for kind, flags in PRESET_PATTERNS.items()},
    "3x2x2": (1, 1, 1, 0, 0, 1, 1, 0, 0),
}


def preset_template(name: str) -> Tuple[int, ...]:
    try:
        return PRESET_TEMPLATES[name]
    except KeyError:
        raise InvalidPatternError(f"Unknown rotation template: {name!r}")


def _as_pattern_type(value: Union[RotationPatternType, str]) -> RotationPatternType:
    try:
        return RotationPatternType(value)
    except ValueError:
        raise InvalidPatternError(f"Unknown rotation pattern type: {value!r}")


def build_pattern(
    pattern_type: Union[RotationPatternType, str],
    custom_pattern: Optional[Sequence] = None,
    *,
    description: Optional[str] = None,
) -> RotationPattern:
    """Preset types return their canonical cycle; `custom` counts the given flags."""
    kind = _as_pattern_type(pattern_type)
    flags = PRESET_PATTERNS[kind] if kind in PRESET_PATTERNS else normalize_flags(custom_pattern)

    return RotationPattern(
        work_days=flags.count(1),
        rest_days=flags.count(0),
        pattern=flags,
        cycle_length=len(flags),
        description=description,
    )


def is_work_day(pattern: RotationPattern, anchor_date: date, target_date: date) -> bool:
    # Python's modulo maps offsets before the anchor into [0, cycle_length).
    offset = days_between(anchor_date, target_date)
    return pattern.flag_at(offset) == 1


class RotationProjection:
    """Finite, restartable view of a pattern over [from_date, to_date]."""

    def __init__(self, pattern: RotationPattern, anchor_date: date, from_date: date, to_date: date):
        require_range(from_date, to_date)
        self.pattern = pattern
        self.anchor_date = anchor_date
        self.from_date = from_date
        self.to_date = to_date

    def __iter__(self) -> Iterator[RotationDay]:
        for i in range(len(self)):
            day = self.from_date + timedelta(days=i)
            yield RotationDay(date=day, is_work_day=is_work_day(self.pattern, self.anchor_date, day))

    def __len__(self) -> int:
        return days_between(self.from_date, self.to_date) + 1


def project_range(pattern: RotationPattern, anchor_date: date, from_date: date, to_date: date) -> RotationProjection:
    return RotationProjection(pattern, anchor_date, from_date, to_date)


def coverage_stats(pattern: RotationPattern, anchor_date: date, from_date: date, to_date: date) -> RotationCoverage:
    projection = project_range(pattern, anchor_date, from_date, to_date)
    work_days = sum(1 for day in projection if day.is_work_day)
    total_days = len(projection)
    return RotationCoverage(
        work_days=work_days,
        rest_days=total_days - work_days,
        coverage_percentage=percentage(work_days, total_days),
    )
