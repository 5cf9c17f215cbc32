from __future__ import annotations

import importlib

from config import get_settings_module


def test_app_env_selects_settings_module(monkeypatch):
    monkeypatch.setenv("APP_ENV", " Prod ")
    assert get_settings_module() == "config.production"

    monkeypatch.setenv("APP_ENV", "test")
    assert get_settings_module() == "config.testing"

    monkeypatch.delenv("APP_ENV")
    assert get_settings_module() == "config.development"


def test_explicit_env_wins_and_unknown_falls_back(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")

    assert get_settings_module("testing") == "config.testing"
    assert get_settings_module("staging") == "config.development"


def test_selected_modules_import():
    for env in ("development", "testing", "production"):
        settings = importlib.import_module(get_settings_module(env))
        assert settings.INTEGRITY_ALGORITHM
