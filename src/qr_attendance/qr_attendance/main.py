from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.logging_utils import configure_logging
from .container import Container, build_container
from .core.exceptions import AuthorizationError, ScanError, ValidationError
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .holidays.controller import register as register_holidays
from .reconciliation.controller import register as register_reconciliation
from .reports.controller import register as register_reports
from .schedules.controller import register as register_schedules
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ScanError)
    @app.errorhandler(ValidationError)
    def handle_bad_request(e):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(AuthorizationError)
    def handle_forbidden(e):
        return jsonify({"success": False, "message": str(e) or "Unauthorized"}), 403

    @app.errorhandler(HTTPException)
    def handle_http(e):
        return jsonify({"success": False, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception("Unhandled error")
        return jsonify({"success": False, "message": "Internal server error"}), 500


def create_app(*, container: Optional[Container] = None) -> Flask:
    """App factory. Pass ``container`` to run against pre-wired (e.g. in-memory) services."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = dict(getattr(settings, "DB_CONFIG"))
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            logger.info("Demo seed ready")

        container = build_container(
            db_config=db_config,
            timezone=getattr(settings, "TIMEZONE", None),
            max_lookback_days=int(getattr(settings, "ATTENDANCE_MAX_LOOKBACK_DAYS", 30)),
        )

    app.extensions["container"] = container

    register_error_handlers(app)
    register_attendance(app, container)
    register_reconciliation(app, container)
    register_reports(app, container)
    register_schedules(app, container)
    register_holidays(app, container)
    register_users(app, container)

    return app
