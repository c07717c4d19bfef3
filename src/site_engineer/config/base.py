import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


def db_config_from_env(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "site_engineer_db"),
    }


def mail_settings_from_env() -> dict:
    return {
        "MAIL_SERVER": os.getenv("MAIL_SERVER", "localhost"),
        "MAIL_PORT": int(os.getenv("MAIL_PORT", "25")),
        "MAIL_USE_TLS": env_flag("MAIL_USE_TLS"),
        "MAIL_USE_SSL": env_flag("MAIL_USE_SSL"),
        "MAIL_USERNAME": os.getenv("MAIL_USERNAME") or None,
        "MAIL_PASSWORD": os.getenv("MAIL_PASSWORD") or None,
        "MAIL_DEFAULT_SENDER": os.getenv("MAIL_DEFAULT_SENDER", "no-reply@site-engineer.local"),
    }


def csv_list(name: str) -> list[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]
