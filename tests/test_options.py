"""Tests for construction-time options and auth resolution."""

import pytest
from pydantic import TypeAdapter

from kiwisdk.auth import (
    Credential,
    EmailPasswordAuth,
    NoAuth,
    NoCredential,
    TokenRefreshAuth,
)
from kiwisdk.client import KiwiClient
from kiwisdk.options import (
    with_admin_email_password,
    with_admin_token,
    with_collection_auth,
    with_credential,
    with_debug,
    with_user_email_password,
    with_user_token,
)

BASE_URL = "https://kiwi.test"


@pytest.mark.parametrize(
    ("option", "strategy_type", "endpoint"),
    [
        (
            with_admin_email_password("a@b.c", "pw"),
            EmailPasswordAuth,
            "/api/admins/auth-with-password",
        ),
        (
            with_user_email_password("u@b.c", "pw"),
            EmailPasswordAuth,
            "/api/collections/users/auth-with-password",
        ),
        (
            with_collection_auth("members", "jane", "pw"),
            EmailPasswordAuth,
            "/api/collections/members/auth-with-password",
        ),
        (with_admin_token("tok"), TokenRefreshAuth, "/api/admins/auth-refresh"),
        (
            with_user_token("tok"),
            TokenRefreshAuth,
            "/api/collections/users/auth-refresh",
        ),
    ],
)
def test_auth_options_install_strategy(make_client, option, strategy_type, endpoint):
    client = make_client(option)
    assert isinstance(client.auth_strategy, strategy_type)
    assert client.auth_strategy.endpoint == f"{BASE_URL}{endpoint}"


def test_auth_options_borrow_client_http_client(make_client):
    client = make_client(with_admin_token("tok"))
    assert client.auth_strategy._token_client is client.http_client
    assert client.auth_strategy._owns_client is False


def test_last_auth_option_wins(make_client):
    client = make_client(
        with_admin_token("tok"), with_user_email_password("u@b.c", "pw")
    )
    assert isinstance(client.auth_strategy, EmailPasswordAuth)
    assert client.auth_strategy.endpoint.endswith(
        "/api/collections/users/auth-with-password"
    )

    client = make_client(
        with_user_email_password("u@b.c", "pw"), with_admin_token("tok")
    )
    assert isinstance(client.auth_strategy, TokenRefreshAuth)


def test_option_overrides_explicit_strategy(make_client):
    client = make_client(with_admin_token("tok"), auth_strategy=NoAuth())
    assert isinstance(client.auth_strategy, TokenRefreshAuth)


def test_freshness_window_comes_from_settings(settings):
    fresh = settings.model_copy(update={"auth_freshness_seconds": 30.0})
    client = KiwiClient(
        BASE_URL, with_admin_email_password("a@b.c", "pw"), settings=fresh
    )
    assert client.auth_strategy._freshness_window == 30.0


def test_with_debug(make_client):
    assert make_client()._debug is False
    assert make_client(with_debug())._debug is True


def test_debug_from_settings(settings):
    debug_settings = settings.model_copy(update={"debug_logging": True})
    assert KiwiClient(BASE_URL, settings=debug_settings)._debug is True


@pytest.mark.parametrize(
    ("overrides", "strategy_type", "endpoint"),
    [
        (
            {"admin_email": "a@b.c", "admin_password": "pw", "user_token": "t"},
            EmailPasswordAuth,
            "/api/admins/auth-with-password",
        ),
        (
            {"user_email": "u@b.c", "user_password": "pw", "admin_token": "t"},
            EmailPasswordAuth,
            "/api/collections/users/auth-with-password",
        ),
        (
            {"admin_token": "t", "user_token": "u"},
            TokenRefreshAuth,
            "/api/admins/auth-refresh",
        ),
        (
            {"user_token": "u"},
            TokenRefreshAuth,
            "/api/collections/users/auth-refresh",
        ),
    ],
)
def test_credentials_from_settings(settings, overrides, strategy_type, endpoint):
    client = KiwiClient(BASE_URL, settings=settings.model_copy(update=overrides))
    assert isinstance(client.auth_strategy, strategy_type)
    assert client.auth_strategy.endpoint == f"{BASE_URL}{endpoint}"


def test_incomplete_settings_credentials_fall_back_to_no_auth(settings):
    partial = settings.model_copy(update={"admin_email": "a@b.c"})
    assert isinstance(KiwiClient(BASE_URL, settings=partial).auth_strategy, NoAuth)


def test_explicit_strategy_beats_settings(settings):
    with_creds = settings.model_copy(update={"admin_token": "t"})
    strategy = NoAuth()
    client = KiwiClient(BASE_URL, settings=with_creds, auth_strategy=strategy)
    assert client.auth_strategy is strategy


def test_with_credential_from_plain_data(make_client):
    credential = TypeAdapter(Credential).validate_python(
        {
            "kind": "email_password",
            "endpoint": f"{BASE_URL}/api/collections/staff/auth-with-password",
            "identity": "s@b.c",
            "password": "pw",
        }
    )
    client = make_client(with_credential(credential))
    assert isinstance(client.auth_strategy, EmailPasswordAuth)
    assert client.auth_strategy.endpoint.endswith(
        "/api/collections/staff/auth-with-password"
    )
    assert client.auth_strategy._token_client is client.http_client


def test_with_credential_none_kind(make_client):
    client = make_client(with_admin_token("tok"), with_credential(NoCredential()))
    assert isinstance(client.auth_strategy, NoAuth)
