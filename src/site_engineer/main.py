from __future__ import annotations

import atexit
import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_mail import Mail

from .assignments.controller import register as register_assignments
from .auth.controller import register as register_auth
from .checkins.controller import register as register_check_ins
from .clients.controller import register as register_clients
from .common.errors import register_error_handlers
from .common.http import ok
from .company.controller import register as register_company
from .config import get_settings_module
from .container import Container, build_container
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .database.connection import DBConfig
from .hr.controller import register as register_hr
from .leaves.controller import register as register_leaves
from .logging_config import setup_logging
from .notifications.transport import FlaskMailTransport
from .profiles.controller import register as register_profiles
from .reports.controller import register as register_reports
from .sites.controller import register as register_sites

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app. Tests pass a pre-assembled container to skip MySQL."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    session_days = int(getattr(settings, "SESSION_DAYS", 7))
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(days=session_days)
    app.config.update(getattr(settings, "MAIL", {}))
    mail = Mail(app)

    db_config = dict(getattr(settings, "DB_CONFIG"))
    logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

    if container is None:
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            ensure_demo_users(db_config)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            transport=FlaskMailTransport(app, mail),
            notify_workers=int(getattr(settings, "NOTIFY_WORKERS", 2)),
            session_days=session_days,
            leave_notify_emails=tuple(getattr(settings, "LEAVE_NOTIFY_EMAILS", ())),
        )
        atexit.register(container.dispatcher.shutdown)

    app.extensions["site_engineer"] = container

    register_error_handlers(app)
    register_auth(app, container)
    register_profiles(app, container)
    register_clients(app, container)
    register_sites(app, container)
    register_assignments(app, container)
    register_check_ins(app, container)
    register_reports(app, container)
    register_leaves(app, container)
    register_dashboard(app, container)
    register_company(app, container)
    register_hr(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return ok({"status": "ok"})

    return app
