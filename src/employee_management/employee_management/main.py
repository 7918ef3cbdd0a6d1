from __future__ import annotations

import importlib
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import RequestEntityTooLarge

from config import get_settings_module

from .common.datetime_utils import parse_clock_time
from .common.http import json_fail
from .core.exceptions import UploadTooLarge
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_employees, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .employees.controller import register as register_employees

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _init_database(db_config: dict, *, auto_init_db: bool, auto_seed_db: bool) -> None:
    if auto_init_db:
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if auto_seed_db:
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        ensure_demo_employees(db_config)
        logger.info("Demo seed ready")


def create_app(container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["UPLOAD_DIR"] = str(getattr(settings, "UPLOAD_DIR", "uploads"))
    app.config["MAX_UPLOAD_BYTES"] = int(getattr(settings, "MAX_UPLOAD_BYTES"))
    # Leaves room for multipart framing and base64 inflation; the image itself is
    # checked against MAX_UPLOAD_BYTES.
    app.config["MAX_CONTENT_LENGTH"] = app.config["MAX_UPLOAD_BYTES"] * 2

    logger.debug(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        _init_database(
            db_config,
            auto_init_db=bool(getattr(settings, "AUTO_INIT_DB", False)),
            auto_seed_db=bool(getattr(settings, "AUTO_SEED_DB", False)),
        )
        container = build_container(
            db_config=db_config,
            face_match_threshold=float(getattr(settings, "FACE_MATCH_THRESHOLD")),
            face_sign_in_required=bool(getattr(settings, "FACE_SIGN_IN_REQUIRED", True)),
            face_client_descriptors=bool(getattr(settings, "FACE_CLIENT_DESCRIPTORS", False)),
            auto_sign_out_time=parse_clock_time(getattr(settings, "AUTO_SIGN_OUT_TIME")),
            auto_sign_out_interval_seconds=float(getattr(settings, "AUTO_SIGN_OUT_INTERVAL_SECONDS")),
        )

    app.extensions["employee_management"] = container

    @app.errorhandler(RequestEntityTooLarge)
    def request_too_large(_e):
        return json_fail(UploadTooLarge.code, "Uploaded file is too large", 413)

    register_employees(app, container)
    register_attendance(app, container)

    # Under the debug reloader only the serving child process runs the sweeper.
    sweeper_enabled = bool(getattr(settings, "AUTO_SIGN_OUT_ENABLED", False))
    if sweeper_enabled and (not app.config["DEBUG"] or os.environ.get("WERKZEUG_RUN_MAIN") == "true"):
        container.sweeper.start()

    return app
