import os

from .base import db_config_from_env

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env(default_password="12345")

MAIL = {
    "MAIL_DEFAULT_SENDER": "no-reply@site-engineer.test",
    "MAIL_SUPPRESS_SEND": True,
}

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

SESSION_DAYS = 7
NOTIFY_WORKERS = 1
LEAVE_NOTIFY_EMAILS: list[str] = []

AUTO_INIT_DB = False
AUTO_SEED_DB = False
