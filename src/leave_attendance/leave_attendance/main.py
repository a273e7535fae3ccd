from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.responses import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from .database.bootstrap import apply_schema, list_tables
from .leaves.controller import register as register_leaves

logger = logging.getLogger("leave_attendance")

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Container | None = None) -> Flask:
    """Build the Flask app.

    ``container`` is injected by tests; otherwise it is built from the active
    settings module (see ``config.get_settings_module``).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

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
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            lock_timeout=float(getattr(settings, "LEAVE_LOCK_TIMEOUT", DEFAULT_LOCK_TIMEOUT_SECONDS)),
        )

    register_error_handlers(app)
    register_attendance(app, container)
    register_leaves(app, container)

    return app
