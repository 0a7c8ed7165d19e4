from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.logging import get_logger, setup_logging
from .database.bootstrap import apply_schema, list_tables
from .geofence.controller import register as register_hostels
from .subjects.controller import register as register_subjects

REPO_ROOT = Path(__file__).resolve().parents[3]

logger = get_logger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(level=getattr(settings, "LOG_LEVEL", "DEBUG" if app.config["DEBUG"] else "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
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

        hostels_file = getattr(settings, "HOSTELS_FILE", None) or REPO_ROOT / "database" / "hostels.json"
        container = build_container(
            db_config=db_config,
            hostels_file=str(hostels_file),
            embedding_timeout_seconds=float(getattr(settings, "EMBEDDING_TIMEOUT_SECONDS", 10.0)),
            embedding_workers=int(getattr(settings, "EMBEDDING_WORKERS", 4)),
            duplicate_slack_days=int(getattr(settings, "DUPLICATE_CHECK_SLACK_DAYS", 0)),
        )

    app.extensions["hostel_attendance"] = container

    register_hostels(app, container)
    register_subjects(app, container)
    register_attendance(app, container)

    return app
