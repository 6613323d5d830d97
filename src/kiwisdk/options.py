"""Construction-time options for :class:`kiwisdk.client.KiwiClient`.

Each factory returns a callable that ``KiwiClient.__init__`` applies in the
order given. Exactly one auth option is expected; when several are passed the
last one wins::

    client = KiwiClient(
        "https://kiwi.example.com",
        with_debug(),
        with_collection_auth("members", "jane", "s3cret"),
    )

Auth strategies built here borrow the client's HTTP client for their token
calls and take the password-auth freshness window from the client's settings.
"""

from typing import TYPE_CHECKING

from . import endpoints
from .auth import (
    Credential,
    EmailPasswordCredential,
    StaticTokenCredential,
    strategy_from_credential,
)
from .types import ClientOption

if TYPE_CHECKING:
    from .client import KiwiClient


def with_credential(credential: Credential) -> ClientOption:
    """Authenticate with a prepared credential, e.g. one loaded from a config file."""

    def apply(client: "KiwiClient") -> None:
        client._install_auth_strategy(
            strategy_from_credential(
                credential,
                http_client=client.http_client,
                freshness_window=client.settings.auth_freshness_seconds,
            )
        )

    return apply


def _password_option(path: str, identity: str, password: str) -> ClientOption:
    def apply(client: "KiwiClient") -> None:
        credential = EmailPasswordCredential(
            endpoint=client.url(path), identity=identity, password=password
        )
        with_credential(credential)(client)

    return apply


def _token_option(path: str, token: str) -> ClientOption:
    def apply(client: "KiwiClient") -> None:
        credential = StaticTokenCredential(endpoint=client.url(path), token=token)
        with_credential(credential)(client)

    return apply


def with_debug() -> ClientOption:
    """Dump every request and response at INFO level."""

    def apply(client: "KiwiClient") -> None:
        client._enable_debug()

    return apply


def with_admin_email_password(email: str, password: str) -> ClientOption:
    """Log in as an admin before each request."""
    return _password_option(endpoints.ADMIN_AUTH_WITH_PASSWORD, email, password)


def with_user_email_password(email: str, password: str) -> ClientOption:
    """Log in as a record of the ``users`` collection before each request."""
    return with_collection_auth(endpoints.USERS_COLLECTION, email, password)


def with_collection_auth(
    collection: str, identity: str, password: str
) -> ClientOption:
    """Log in as a record of any auth collection before each request."""
    return _password_option(
        endpoints.collection_auth_with_password(collection), identity, password
    )


def with_admin_token(token: str) -> ClientOption:
    """Use a pre-issued admin token, refreshed on first use."""
    return _token_option(endpoints.ADMIN_AUTH_REFRESH, token)


def with_user_token(token: str) -> ClientOption:
    """Use a pre-issued ``users`` token, refreshed on first use."""
    return _token_option(
        endpoints.collection_auth_refresh(endpoints.USERS_COLLECTION), token
    )
