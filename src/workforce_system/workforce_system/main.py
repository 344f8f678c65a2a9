from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, list_tables

from .container import build_container
from .assignments.controller import register as register_assignments
from .coverage.controller import register as register_coverage
from .rotations.controller import register as register_rotations
from .schedules.controller import register as register_schedules

SCHEDULING_SETTINGS = (
    "WEEKLY_HOUR_CAP",
    "DAILY_HOUR_CAP",
    "STANDARD_SHIFT_HOURS",
    "REQUIRED_STAFF_PER_DAY",
    "COVERAGE_ADEQUATE_THRESHOLD",
    "COVERAGE_OVERSTAFFED_THRESHOLD",
)

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    database_dir = Path(__file__).resolve().parents[3] / "database"
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=database_dir / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=database_dir / "seed.sql")
        logger.info("Demo seed ready")

    scheduling = {name: getattr(settings, name) for name in SCHEDULING_SETTINGS if hasattr(settings, name)}
    container = build_container(db_config=db_config, settings=scheduling)

    register_rotations(app, container)
    register_schedules(app, container)
    register_assignments(app, container)
    register_coverage(app, container)

    return app
