from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .common.logging import configure_logging
from .container import Container, build_container
from .core.policy import AttendancePolicy
from .database.bootstrap import apply_schema, ensure_demo_employees, list_tables
from .employees.controller import register as register_employees
from .notifications.controller import register as register_notifications
from .notifications.mailer import MailSettings, SmtpMailer


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logger = configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_DIR", "") or None)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "starting settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready tables=%d", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_employees(db_config)
            logger.info("demo employees ready")

        policy = AttendancePolicy.from_settings(settings)
        container = build_container(
            db_config=db_config,
            policy=policy,
            mailer=SmtpMailer(MailSettings.from_settings(settings), logger=logger.getChild("mail")),
            logger=logger,
            jwt_secret=getattr(settings, "JWT_SECRET"),
            qr_secret=getattr(settings, "QR_SECRET"),
            jwt_expires_hours=int(getattr(settings, "JWT_EXPIRES_HOURS", 24)),
        )

    app.extensions["container"] = container
    register_error_handlers(app, container.logger)

    register_employees(app, container)
    register_attendance(app, container)
    register_notifications(app, container)

    return app
