from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator, Union

from ..core.constants import MINUTES_PER_DAY
from ..core.exceptions import InvalidRangeError, InvalidTimeRangeError

TimeLike = Union[str, time]

_TIME_FORMATS = ("%H:%M:%S", "%H:%M")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_shift_time(value: TimeLike) -> time:
    """Parse a wall-clock shift time ("HH:MM" or "HH:MM:SS")."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise InvalidTimeRangeError(f"Invalid shift time: {value!r}")

    raw = value.strip()
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(raw, fmt).time()
        except ValueError:
            continue
    raise InvalidTimeRangeError(f"Invalid shift time: {value!r} (expected HH:MM)")


def minute_of_day(value: TimeLike) -> int:
    t = parse_shift_time(value)
    return t.hour * 60 + t.minute


def shift_interval(start: TimeLike, end: TimeLike) -> tuple[int, int]:
    """Half-open [start, end) in minutes from midnight of the shift's date.

    An end at or before the start wraps into the next day (+24h).
    """
    start_min = minute_of_day(start)
    end_min = minute_of_day(end)
    if end_min <= start_min:
        end_min += MINUTES_PER_DAY
    return start_min, end_min


def shift_minutes(start: TimeLike, end: TimeLike) -> int:
    start_min, end_min = shift_interval(start, end)
    return end_min - start_min


def shift_hours(start: TimeLike, end: TimeLike) -> float:
    """Shift duration in hours, one decimal (e.g. 8.0)."""
    return round(shift_minutes(start, end) / 60, 1)


def format_time(value: TimeLike) -> str:
    return parse_shift_time(value).strftime("%H:%M")


def days_between(start: date, end: date) -> int:
    return (end - start).days


def week_bounds(day: date) -> tuple[date, date]:
    """Monday..Sunday week containing `day`."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def week_of_month(day: date) -> int:
    return (day.day + 6) // 7


def require_range(start: date, end: date) -> None:
    if end < start:
        raise InvalidRangeError(f"Invalid date range: {start.isoformat()} > {end.isoformat()}")


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every date in [start, end] inclusive."""
    require_range(start, end)
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def round_half_up(numerator: int, denominator: int) -> int:
    """round(numerator / denominator) with .5 rounding up, in integer arithmetic."""
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return (2 * numerator + denominator) // (2 * denominator)


def percentage(part: int, whole: int) -> int:
    return round_half_up(part * 100, whole)
