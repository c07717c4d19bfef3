import os

from .base import csv_list, db_config_from_env, env_flag, mail_settings_from_env

SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    raise RuntimeError("SECRET_KEY must be set when APP_ENV=production")

DB_CONFIG = db_config_from_env()

MAIL = mail_settings_from_env()
MAIL["MAIL_SUPPRESS_SEND"] = False

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
NOTIFY_WORKERS = int(os.getenv("NOTIFY_WORKERS", "4"))
LEAVE_NOTIFY_EMAILS = csv_list("LEAVE_NOTIFY_EMAILS")

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
