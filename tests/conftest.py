# tests/conftest.py
import pytest

from kiwisdk.client import KiwiClient
from kiwisdk.config import ClientSettings

BASE_URL = "https://kiwi.test"


@pytest.fixture
def settings() -> ClientSettings:
    """Settings with retries disabled and no credentials."""
    return ClientSettings(
        max_retries=0,
        retry_wait_seconds=0,
        admin_email=None,
        admin_password=None,
        user_email=None,
        user_password=None,
        admin_token=None,
        user_token=None,
    )


@pytest.fixture
def make_client(settings):
    """Factory for KiwiClient instances against BASE_URL; use with ``async with``."""

    def _make(*options, **kwargs) -> KiwiClient:
        kwargs.setdefault("settings", settings)
        return KiwiClient(BASE_URL, *options, **kwargs)

    return _make
