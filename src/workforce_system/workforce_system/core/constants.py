"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_WEEKLY_HOUR_CAP = 48
DEFAULT_DAILY_HOUR_CAP = 12
DEFAULT_REQUIRED_STAFF_PER_DAY = 5
DEFAULT_STANDARD_SHIFT_HOURS = 8

COVERAGE_ADEQUATE_THRESHOLD = 80
COVERAGE_OVERSTAFFED_THRESHOLD = 100

MINUTES_PER_DAY = 24 * 60
DEFAULT_LIST_DAYS = 7
