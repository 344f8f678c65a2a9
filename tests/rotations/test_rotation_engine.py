from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.workforce_system.workforce_system.core.enums import RotationPatternType
from src.workforce_system.workforce_system.core.exceptions import InvalidPatternError, InvalidRangeError
from src.workforce_system.workforce_system.rotations.engine import (
    PRESET_PATTERNS,
    build_pattern,
    coverage_stats,
    is_work_day,
    preset_template,
    project_range,
)
from src.workforce_system.workforce_system.rotations.model import RotationPattern


ANCHOR = date(2026, 1, 5)


@pytest.mark.parametrize(
    "pattern_type, expected",
    [
        ("4x2", (1, 1, 1, 1, 0, 0)),
        ("5x2", (1, 1, 1, 1, 1, 0, 0)),
        ("6x1", (1, 1, 1, 1, 1, 1, 0)),
    ],
)
def test_presets_return_canonical_cycles(pattern_type, expected):
    pattern = build_pattern(pattern_type)

    assert pattern.pattern == expected
    assert pattern.cycle_length == len(expected)
    assert pattern.work_days == expected.count(1)
    assert pattern.rest_days == expected.count(0)


def test_preset_ignores_custom_flags():
    pattern = build_pattern(RotationPatternType.SIX_BY_ONE, [0, 0, 1])
    assert pattern.pattern == PRESET_PATTERNS[RotationPatternType.SIX_BY_ONE]


@pytest.mark.parametrize("flags", [[1], [0], [1, 0, 1, 1, 0], [0, 0, 0, 1, 1, 1, 1, 1]])
def test_custom_pattern_keeps_flags_and_counts(flags):
    pattern = build_pattern("custom", flags)

    assert list(pattern.pattern) == flags
    assert pattern.work_days == flags.count(1)
    assert pattern.rest_days == flags.count(0)
    assert pattern.cycle_length == len(flags)


def test_three_two_two_template_is_custom_pattern():
    pattern = build_pattern("custom", preset_template("3x2x2"))

    assert pattern.pattern == (1, 1, 1, 0, 0, 1, 1, 0, 0)
    assert (pattern.work_days, pattern.rest_days, pattern.cycle_length) == (5, 4, 9)


@pytest.mark.parametrize(
    "flags",
    [None, [], [1, 2, 0], [1, -1], ["1", "0"], "1100", [True, False], (f for f in (1, 0)), {1, 0}],
)
def test_invalid_custom_patterns_raise(flags):
    with pytest.raises(InvalidPatternError):
        build_pattern("custom", flags)


def test_unknown_pattern_type_raises():
    with pytest.raises(InvalidPatternError):
        build_pattern("3x3")


def test_unknown_template_raises():
    with pytest.raises(InvalidPatternError):
        preset_template("7x7")


def test_is_work_day_follows_cycle_from_anchor():
    pattern = build_pattern("4x2")
    flags = [is_work_day(pattern, ANCHOR, ANCHOR + timedelta(days=i)) for i in range(8)]

    assert flags == [True, True, True, True, False, False, True, True]


def test_is_work_day_before_anchor_wraps_backwards():
    pattern = build_pattern("4x2")

    # offset -1 -> index 5 (rest), offset -6 -> index 0 (work)
    assert is_work_day(pattern, ANCHOR, ANCHOR - timedelta(days=1)) is False
    assert is_work_day(pattern, ANCHOR, ANCHOR - timedelta(days=3)) is True
    assert is_work_day(pattern, ANCHOR, ANCHOR - timedelta(days=6)) is True


@pytest.mark.parametrize("flags", [[1, 1, 1, 1, 0, 0], [1, 0, 0], [1, 1, 1, 0, 0, 1, 1, 0, 0]])
def test_is_work_day_is_periodic(flags):
    pattern = build_pattern("custom", flags)
    period = timedelta(days=pattern.cycle_length)

    for offset in range(-30, 30):
        day = ANCHOR + timedelta(days=offset)
        assert is_work_day(pattern, ANCHOR, day) == is_work_day(pattern, ANCHOR, day + period)


def test_project_range_covers_every_date_inclusive():
    pattern = build_pattern("5x2")
    projection = project_range(pattern, ANCHOR, date(2026, 1, 30), date(2026, 2, 2))

    days = list(projection)
    assert len(projection) == 4
    assert [d.date for d in days] == [date(2026, 1, 30), date(2026, 1, 31), date(2026, 2, 1), date(2026, 2, 2)]
    assert all(d.is_work_day == is_work_day(pattern, ANCHOR, d.date) for d in days)


def test_project_range_is_restartable():
    projection = project_range(build_pattern("6x1"), ANCHOR, ANCHOR, ANCHOR + timedelta(days=13))
    assert list(projection) == list(projection)


def test_project_range_single_day():
    days = list(project_range(build_pattern("4x2"), ANCHOR, ANCHOR, ANCHOR))
    assert len(days) == 1
    assert days[0].is_work_day is True


def test_project_range_rejects_reversed_range_before_iteration():
    with pytest.raises(InvalidRangeError):
        project_range(build_pattern("4x2"), ANCHOR, date(2026, 2, 1), date(2026, 1, 31))


def test_coverage_stats_over_full_cycle():
    stats = coverage_stats(build_pattern("4x2"), ANCHOR, ANCHOR, ANCHOR + timedelta(days=5))

    assert (stats.work_days, stats.rest_days) == (4, 2)
    assert stats.coverage_percentage == 67


def test_coverage_stats_rounds_to_nearest():
    stats = coverage_stats(build_pattern("5x2"), ANCHOR, ANCHOR, ANCHOR + timedelta(days=13))

    assert (stats.work_days, stats.rest_days) == (10, 4)
    assert stats.coverage_percentage == 71


def test_coverage_stats_rest_day_only():
    rest_day = ANCHOR + timedelta(days=4)
    stats = coverage_stats(build_pattern("4x2"), ANCHOR, rest_day, rest_day)

    assert (stats.work_days, stats.rest_days, stats.coverage_percentage) == (0, 1, 0)


def test_coverage_stats_reversed_range_raises():
    with pytest.raises(InvalidRangeError):
        coverage_stats(build_pattern("4x2"), ANCHOR, ANCHOR, ANCHOR - timedelta(days=1))


def test_pattern_json_round_trip():
    pattern = build_pattern("custom", [1, 1, 0], description="Two on, one off")
    restored = RotationPattern.from_json(pattern.to_json())

    assert restored == pattern


@pytest.mark.parametrize(
    "document",
    [
        {"work_days": 3, "rest_days": 2, "pattern": [1, 1, 1, 1, 0, 0], "cycle_length": 6},
        {"work_days": 4, "rest_days": 2, "pattern": [1, 1, 1, 1, 0, 0], "cycle_length": 7},
        {"work_days": 1, "rest_days": 1, "pattern": [1, 3]},
        {"work_days": 1, "rest_days": 1},
        {"work_days": "many", "rest_days": 1, "pattern": [1, 0]},
    ],
)
def test_pattern_json_with_inconsistent_fields_raises(document):
    with pytest.raises(InvalidPatternError):
        RotationPattern.from_json(document)


def test_pattern_rejects_mismatched_counts_on_construction():
    with pytest.raises(InvalidPatternError):
        RotationPattern(work_days=2, rest_days=2, pattern=(1, 0, 0), cycle_length=3)
