import os


def get_settings_module() -> str:
    # Select settings from APP_ENV, defaulting to development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "site_engineer.config.production"

    if env in {"test", "testing"}:
        return "site_engineer.config.testing"

    return "site_engineer.config.development"
