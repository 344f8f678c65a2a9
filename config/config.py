import os


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, str(default)))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "change-me"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = _env_int("DB_PORT", 3306)
    DB_NAME = os.environ.get("DB_NAME", "workforce_db")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Scheduling rules
    WEEKLY_HOUR_CAP = _env_int("WEEKLY_HOUR_CAP", 48)
    DAILY_HOUR_CAP = _env_int("DAILY_HOUR_CAP", 12)
    STANDARD_SHIFT_HOURS = _env_int("STANDARD_SHIFT_HOURS", 8)
    REQUIRED_STAFF_PER_DAY = _env_int("REQUIRED_STAFF_PER_DAY", 5)
    COVERAGE_ADEQUATE_THRESHOLD = _env_int("COVERAGE_ADEQUATE_THRESHOLD", 80)
    COVERAGE_OVERSTAFFED_THRESHOLD = _env_int("COVERAGE_OVERSTAFFED_THRESHOLD", 100)

    # Dev helpers
    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))
    AUTO_SEED_DB = bool(int(os.environ.get("AUTO_SEED_DB", "0")))


# Module-level names are what create_app() reads.
SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}

DEBUG = bool(int(os.environ.get("DEBUG", "1")))
LOG_LEVEL = Config.LOG_LEVEL

WEEKLY_HOUR_CAP = Config.WEEKLY_HOUR_CAP
DAILY_HOUR_CAP = Config.DAILY_HOUR_CAP
STANDARD_SHIFT_HOURS = Config.STANDARD_SHIFT_HOURS
REQUIRED_STAFF_PER_DAY = Config.REQUIRED_STAFF_PER_DAY
COVERAGE_ADEQUATE_THRESHOLD = Config.COVERAGE_ADEQUATE_THRESHOLD
COVERAGE_OVERSTAFFED_THRESHOLD = Config.COVERAGE_OVERSTAFFED_THRESHOLD

AUTO_INIT_DB = Config.AUTO_INIT_DB
AUTO_SEED_DB = Config.AUTO_SEED_DB
