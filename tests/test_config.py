from __future__ import annotations

import importlib
import sys

import pytest

from site_engineer.config import get_settings_module

PRODUCTION = "site_engineer.config.production"


@pytest.fixture
def fresh_production(monkeypatch):
    monkeypatch.delitem(sys.modules, PRODUCTION, raising=False)
    yield
    sys.modules.pop(PRODUCTION, None)


def test_app_env_selects_settings_module(monkeypatch):
    monkeypatch.setenv("APP_ENV", "prod")
    assert get_settings_module() == PRODUCTION
    monkeypatch.setenv("APP_ENV", "testing")
    assert get_settings_module() == "site_engineer.config.testing"
    monkeypatch.delenv("APP_ENV", raising=False)
    assert get_settings_module() == "site_engineer.config.development"


def test_production_refuses_to_start_without_secret_key(monkeypatch, fresh_production):
    monkeypatch.delenv("SECRET_KEY", raising=False)

    with pytest.raises(RuntimeError, match="SECRET_KEY"):
        importlib.import_module(PRODUCTION)


def test_production_uses_secret_key_from_environment(monkeypatch, fresh_production):
    monkeypatch.setenv("SECRET_KEY", "s3cret-from-env")

    settings = importlib.import_module(PRODUCTION)

    assert settings.SECRET_KEY == "s3cret-from-env"
    assert settings.DEBUG is False
