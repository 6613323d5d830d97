"""Tests for ClientSettings loading."""

import pytest
from pydantic import ValidationError

from kiwisdk.config import DEFAULT_USER_AGENT, ClientSettings, get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch):
    for name in ("KIWI_ADMIN_TOKEN", "KIWI_MAX_RETRIES", "KIWI_DEBUG_LOGGING"):
        monkeypatch.delenv(name, raising=False)
    settings = ClientSettings(_env_file=None)
    assert settings.request_timeout == 30.0
    assert settings.max_retries == 3
    assert settings.retry_wait_seconds == 3.0
    assert settings.retry_max_wait_seconds == 10.0
    assert settings.user_agent == DEFAULT_USER_AGENT
    assert settings.debug_logging is False
    assert settings.auth_freshness_seconds == 0.0
    assert settings.admin_token is None


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("KIWI_ADMIN_TOKEN", "env-token")
    monkeypatch.setenv("KIWI_MAX_RETRIES", "5")
    monkeypatch.setenv("kiwi_debug_logging", "true")

    settings = ClientSettings(_env_file=None)

    assert settings.admin_token == "env-token"
    assert settings.max_retries == 5
    assert settings.debug_logging is True


def test_rejects_negative_values():
    with pytest.raises(ValidationError):
        ClientSettings(_env_file=None, max_retries=-1)
    with pytest.raises(ValidationError):
        ClientSettings(_env_file=None, auth_freshness_seconds=-1)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
