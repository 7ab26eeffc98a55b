"""Proctor Portal package.

Feature modules (users, attendance, academics, mentoring, queries,
passwords) each keep a thin Flask controller on top of service and
repository layers.
"""
from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .academics.controller import register as register_academics
from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_RESET_TOKEN_TTL_MINUTES, DEFAULT_SESSION_HOURS
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .mentoring.controller import register as register_mentoring
from .passwords.controller import register as register_passwords
from .passwords.mailer import mail
from .queries.controller import register as register_queries
from .settings import get_settings_module
from .users.controller import register as register_users

_MAIL_KEYS = (
    "MAIL_SERVER",
    "MAIL_PORT",
    "MAIL_USE_TLS",
    "MAIL_USE_SSL",
    "MAIL_USERNAME",
    "MAIL_PASSWORD",
    "MAIL_DEFAULT_SENDER",
    "MAIL_SUPPRESS_SEND",
)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass a pre-built ``container`` to run against other repositories (tests
    use in-memory ones); otherwise the MySQL container is built from the
    settings module picked by ``APP_ENV``.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["CLIENT_URL"] = getattr(settings, "CLIENT_URL", "http://localhost:5000")
    app.config["RESET_TOKEN_TTL_MINUTES"] = int(
        getattr(settings, "RESET_TOKEN_TTL_MINUTES", DEFAULT_RESET_TOKEN_TTL_MINUTES)
    )
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(hours=DEFAULT_SESSION_HOURS)
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_SECURE"] = bool(getattr(settings, "SESSION_COOKIE_SECURE", False))
    for key in _MAIL_KEYS:
        if hasattr(settings, key):
            app.config[key] = getattr(settings, key)

    mail.init_app(app)
    if not app.debug:
        app.logger.setLevel(logging.INFO)

    if container is None:
        app.logger.info(
            "[proctor-portal] settings=%s db=%s", settings_module, DBConfig.from_mapping(db_config).describe()
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
            apply_schema(conn)
            app.logger.info("[proctor-portal] schema ready (tables=%s)", len(list_tables(conn)))

        container = build_container(
            db_config=db_config,
            client_url=app.config["CLIENT_URL"],
            reset_ttl_minutes=app.config["RESET_TOKEN_TTL_MINUTES"],
        )

    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_academics(app, container)
    register_mentoring(app, container)
    register_queries(app, container)
    register_passwords(app, container)

    return app
