from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.datetime_utils import parse_clock_time
from .common.http import register_error_handlers
from .common.log import configure_logging
from .container import build_container
from .core.constants import DEFAULT_SCHEDULER_RUN_AT
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .scheduler.controller import register as register_scheduler
from .scheduler.runner import DailyJobRunner

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "DEBUG" if app.config["DEBUG"] else "INFO"))
    backend = str(getattr(settings, "STORAGE_BACKEND", "mysql")).lower()
    logger.info("Starting with settings=%s backend=%s", settings_module, backend)

    if backend == "mysql":
        db_config = getattr(settings, "DB_CONFIG")
        logger.debug(
            "Database %s@%s:%s/%s",
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")
            logger.info("Demo seed ready")

    container = build_container(settings)
    app.extensions["practicum_attendance"] = container

    register_error_handlers(app)
    register_attendance(app, container)
    register_scheduler(app, container)

    if bool(getattr(settings, "ABSENCE_SCHEDULER_ENABLED", False)):
        run_at = getattr(settings, "ABSENCE_SCHEDULER_RUN_AT", "") or None
        runner = DailyJobRunner(
            container.absence_scheduler.create_absent_records_for_date,
            run_at=parse_clock_time(run_at) if run_at else DEFAULT_SCHEDULER_RUN_AT,
            clock=container.clock,
            name="absence-backfill",
        )
        runner.start()
        app.extensions["absence_runner"] = runner

    return app
