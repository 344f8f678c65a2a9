from __future__ import annotations

from datetime import date, time

import pytest

from src.workforce_system.workforce_system.common.datetime_utils import (
    iter_dates,
    parse_shift_time,
    percentage,
    round_half_up,
    shift_hours,
    shift_interval,
    week_bounds,
    week_of_month,
)
from src.workforce_system.workforce_system.core.exceptions import InvalidRangeError, InvalidTimeRangeError


def test_parse_shift_time_accepts_both_formats():
    assert parse_shift_time("08:30") == time(8, 30)
    assert parse_shift_time(" 22:00:00 ") == time(22, 0)
    assert parse_shift_time(time(6)) == time(6)


@pytest.mark.parametrize("value", ["24:00", "8h", "", 800])
def test_parse_shift_time_rejects_garbage(value):
    with pytest.raises(InvalidTimeRangeError):
        parse_shift_time(value)


def test_shift_interval_wraps_past_midnight():
    assert shift_interval("08:00", "16:00") == (480, 960)
    assert shift_interval("22:00", "06:00") == (1320, 1800)
    assert shift_interval("08:00", "08:00") == (480, 1920)


def test_shift_hours():
    assert shift_hours("08:00", "16:30") == 8.5
    assert shift_hours("22:00", "06:00") == 8.0


def test_week_bounds_run_monday_to_sunday():
    assert week_bounds(date(2025, 10, 8)) == (date(2025, 10, 6), date(2025, 10, 12))
    assert week_bounds(date(2025, 10, 12)) == (date(2025, 10, 6), date(2025, 10, 12))


@pytest.mark.parametrize("day, week", [(1, 1), (7, 1), (8, 2), (28, 4), (29, 5), (31, 5)])
def test_week_of_month(day, week):
    assert week_of_month(date(2025, 10, day)) == week


def test_iter_dates_is_inclusive():
    assert list(iter_dates(date(2025, 12, 30), date(2026, 1, 1))) == [
        date(2025, 12, 30),
        date(2025, 12, 31),
        date(2026, 1, 1),
    ]
    with pytest.raises(InvalidRangeError):
        list(iter_dates(date(2026, 1, 2), date(2026, 1, 1)))


def test_rounding_is_half_up():
    assert round_half_up(5, 2) == 3
    assert round_half_up(1, 8) == 0
    assert percentage(1, 8) == 13
    assert percentage(0, 5) == 0
