from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .common.logging import get_logger, setup_logging
from .container import Container, build_container, build_memory_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables

from .attendance.controller import register as register_attendance
from .notices.controller import register as register_notices
from .reports.controller import register as register_reports
from .timetable.controller import register as register_timetable

log = get_logger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _build(settings):
    storage = str(getattr(settings, "STORAGE", "mysql")).lower()
    threshold = int(getattr(settings, "LOW_ATTENDANCE_THRESHOLD", 75))
    if storage == "memory":
        return build_memory_container(low_threshold=threshold)

    db_config = getattr(settings, "DB_CONFIG")
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        log.info("database_ready", tables=len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
    return build_container(db_config=db_config, low_threshold=threshold)


def create_app(settings_module: str | None = None, *, container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(
        json_output=bool(getattr(settings, "LOG_JSON", False)),
        log_level=str(getattr(settings, "LOG_LEVEL", "INFO")),
    )
    log.info("app_starting", settings=settings_module, storage=getattr(settings, "STORAGE", "mysql"))

    container = container or _build(settings)
    app.extensions["class_attendance"] = container

    register_timetable(app, container)
    register_attendance(app, container)
    register_reports(app, container)
    register_notices(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"success": True})

    return app
