import os

from .base import csv_list, db_config_from_env, env_flag, mail_settings_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env(default_password="secret")

MAIL = mail_settings_from_env()
MAIL["MAIL_SUPPRESS_SEND"] = env_flag("MAIL_SUPPRESS_SEND", "1")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
NOTIFY_WORKERS = int(os.getenv("NOTIFY_WORKERS", "2"))
LEAVE_NOTIFY_EMAILS = csv_list("LEAVE_NOTIFY_EMAILS")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Optional: also seed demo accounts on startup
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
