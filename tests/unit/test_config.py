"""Unit tests for environment-backed settings."""

from __future__ import annotations

import pytest

from reqcheck.core.config import Settings
from reqcheck.core.config import get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_disable_access_control(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("REQCHECK_ACCESS_SECRET", "REQCHECK_SECRET_HEADER", "REQCHECK_EXEMPT_PATHS", "REQCHECK_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings == Settings()
    assert settings.access_control_enabled is False


def test_settings_are_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REQCHECK_ACCESS_SECRET", "Excellent")
    monkeypatch.setenv("REQCHECK_SECRET_HEADER", "X-Secret")
    monkeypatch.setenv("REQCHECK_EXEMPT_PATHS", "/health, /status")
    monkeypatch.setenv("REQCHECK_LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.access_control_enabled is True
    assert settings.secret_header == "X-Secret"
    assert settings.exempt_paths == ("/health", "/status")
    assert settings.log_level == "DEBUG"


def test_safe_for_logging_redacts_secret() -> None:
    assert Settings(access_secret="Excellent").safe_for_logging()["access_secret"] == "<redacted>"
    assert Settings().safe_for_logging()["access_secret"] == "<empty>"
