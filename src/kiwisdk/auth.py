import asyncio
import time
from enum import Enum
from typing import Annotated, Literal, Protocol

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import AuthError, ConfigurationError
from .log_config import logger


class AuthStrategyType(str, Enum):
    """Enumeration of available authentication strategy types.

    Used as the discriminator of the credential variants.
    """

    NONE = "none"
    EMAIL_PASSWORD = "email_password"
    STATIC_TOKEN = "static_token"


class NoCredential(BaseModel):
    """The endpoint needs no authentication."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[AuthStrategyType.NONE] = AuthStrategyType.NONE


class EmailPasswordCredential(BaseModel):
    """Identity and secret posted to an ``auth-with-password`` endpoint."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[AuthStrategyType.EMAIL_PASSWORD] = AuthStrategyType.EMAIL_PASSWORD
    endpoint: str
    identity: str
    password: str = Field(repr=False)


class StaticTokenCredential(BaseModel):
    """A pre-issued token, validated through an ``auth-refresh`` endpoint."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[AuthStrategyType.STATIC_TOKEN] = AuthStrategyType.STATIC_TOKEN
    endpoint: str
    token: str = Field(repr=False)


Credential = Annotated[
    NoCredential | EmailPasswordCredential | StaticTokenCredential,
    Field(discriminator="kind"),
]


class TokenState(BaseModel):
    """Snapshot of a strategy's cached token.

    Replaced as a whole, never mutated in place, so readers always see a
    consistent token/timestamp pair.
    """

    model_config = ConfigDict(frozen=True)

    token: str = Field(repr=False)
    fetched_at: float = Field(description="time.monotonic() of the fetch")
    valid: bool = False

    def age(self) -> float:
        return time.monotonic() - self.fetched_at


class AuthStrategy(Protocol):
    """Protocol defining the interface for the authentication strategies.

    The client awaits :meth:`async_authorize` before every gated request and
    then attaches :meth:`current_token`, if any, as a Bearer token.
    """

    async def async_authorize(self) -> None:
        """
        Ensures the strategy holds a usable token, fetching one if its policy says so.

        Safe to call repeatedly and concurrently. On failure the previously
        cached state is left untouched.

        Raises:
            AuthError: If the auth endpoint rejects the credential or cannot be reached.
        """
        ...

    def current_token(self) -> str | None:
        """Returns the cached token, or None if this strategy never produces one."""
        ...

    async def async_close(self) -> None:
        """
        Closes any HTTP client the strategy created for itself.
        This method should be idempotent.
        """
        ...


class NoAuth:
    """Implements the AuthStrategy protocol for backends requiring no authentication."""

    async def async_authorize(self) -> None:
        """Does nothing as no authentication is needed."""
        logger.trace("Using NoAuth strategy, no authentication applied.")

    def current_token(self) -> str | None:
        return None

    async def async_close(self) -> None:
        """No resources to close for NoAuth, this method is a no-op."""


class _TokenEndpointAuth:
    """Shared plumbing of the strategies that talk to an auth endpoint.

    Holds the endpoint, the optional borrowed HTTP client, the token state and
    the lock serializing writes to it.
    """

    def __init__(self, endpoint: str, http_client: httpx.AsyncClient | None = None):
        self._endpoint = endpoint
        self._token_client = http_client
        self._owns_client = http_client is None
        self._state: TokenState | None = None
        self._lock = asyncio.Lock()

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def state(self) -> TokenState | None:
        return self._state

    def current_token(self) -> str | None:
        state = self._state
        return state.token if state else None

    def _get_token_client(self) -> httpx.AsyncClient:
        """Returns the HTTP client for auth calls, creating a private one lazily."""
        if self._token_client is None:
            self._token_client = httpx.AsyncClient(timeout=15.0)
        return self._token_client

    async def _post_for_token(
        self,
        *,
        json_data: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> str:
        """POSTs to the auth endpoint and returns the ``token`` from its reply.

        Raises:
            AuthError: On an error status, a transport failure, or a reply
                without a token.
        """
        client = self._get_token_client()
        try:
            response = await client.post(
                self._endpoint, json=json_data, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Auth endpoint {self._endpoint} rejected the credential: "
                f"{e.response.status_code}"
            )
            raise AuthError(
                f"Authentication failed: {e.response.status_code} - {e.response.text}",
                response=e.response,
                request=e.request,
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Could not reach auth endpoint {self._endpoint}: {e}")
            raise AuthError(f"Authentication endpoint unreachable: {e}") from e

        try:
            token = response.json().get("token")
        except (ValueError, AttributeError) as e:
            raise AuthError(
                "Authentication response is not a JSON object.", response=response
            ) from e
        if not token or not isinstance(token, str):
            raise AuthError(
                "Token not found in authentication response.", response=response
            )
        return token

    async def async_close(self) -> None:
        """Closes the internal HTTP client used for token fetching, if this strategy created it."""
        if self._owns_client and self._token_client is not None:
            await self._token_client.aclose()
            self._token_client = None
            logger.debug(f"{type(self).__name__} internal client closed.")


class TokenRefreshAuth(_TokenEndpointAuth):
    """Implements AuthStrategy for a statically supplied token.

    The first :meth:`async_authorize` sends the token to the ``auth-refresh``
    endpoint, which validates it and may rotate it; the returned token is
    cached and reused by every later call. Until that succeeds,
    :meth:`current_token` returns the supplied token, so a caller may still
    choose to proceed after an :class:`AuthError`.
    """

    def __init__(
        self,
        endpoint: str | None,
        token: str | None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initializes TokenRefreshAuth.

        Args:
            endpoint: Full URL of the ``auth-refresh`` endpoint.
            token: The token to validate and rotate.
            http_client: Optional client for the refresh call; it is borrowed,
                not closed by this strategy.

        Raises:
            ConfigurationError: If the endpoint or token is None or empty.
        """
        if not endpoint or not token:
            raise ConfigurationError(
                "TokenRefreshAuth requires a non-empty 'endpoint' and 'token'."
            )
        super().__init__(endpoint, http_client)
        self._state = TokenState(token=token, fetched_at=time.monotonic(), valid=False)
        logger.debug("TokenRefreshAuth initialized.")

    async def async_authorize(self) -> None:
        """Refreshes the token once, then reuses the refreshed token."""
        if self._state is not None and self._state.valid:
            return
        async with self._lock:
            # Double-check if another caller refreshed while we waited for the lock
            if self._state is not None and self._state.valid:
                return
            assert self._state is not None
            logger.info(f"Refreshing token at {self._endpoint}")
            token = await self._post_for_token(
                headers={"Authorization": f"Bearer {self._state.token}"}
            )
            self._state = TokenState(token=token, fetched_at=time.monotonic(), valid=True)
            logger.info("Token refreshed successfully.")


class EmailPasswordAuth(_TokenEndpointAuth):
    """Implements AuthStrategy by logging in with an identity and password.

    By default every :meth:`async_authorize` performs a fresh login, so each
    gated request runs with a token obtained moments before. Passing a
    ``freshness_window`` reuses a token younger than that many seconds
    instead, trading one login per request for one per window.
    """

    def __init__(
        self,
        endpoint: str | None,
        identity: str | None,
        password: str | None,
        *,
        freshness_window: float = 0.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initializes EmailPasswordAuth.

        Args:
            endpoint: Full URL of the ``auth-with-password`` endpoint.
            identity: Email or username to log in with.
            password: The password.
            freshness_window: Seconds a fetched token is reused; 0 disables reuse.
            http_client: Optional client for login calls; borrowed, not closed.

        Raises:
            ConfigurationError: If a required argument is missing or the window is negative.
        """
        if not all([endpoint, identity, password]):
            raise ConfigurationError(
                "EmailPasswordAuth requires 'endpoint', 'identity', and 'password'."
            )
        if freshness_window < 0:
            raise ConfigurationError("freshness_window must not be negative.")
        assert endpoint is not None, "endpoint cannot be None here"
        assert identity is not None, "identity cannot be None here"
        assert password is not None, "password cannot be None here"
        super().__init__(endpoint, http_client)
        self._identity: str = identity
        self._password: str = password
        self._freshness_window = freshness_window
        logger.debug("EmailPasswordAuth initialized.")

    def _is_fresh(self) -> bool:
        return (
            self._freshness_window > 0
            and self._state is not None
            and self._state.valid
            and self._state.age() < self._freshness_window
        )

    async def async_authorize(self) -> None:
        """Logs in and caches the returned token, unless the cached one is still fresh."""
        async with self._lock:
            if self._is_fresh():
                logger.trace("Reusing fresh password-auth token.")
                return
            logger.debug(f"Authenticating at {self._endpoint}")
            token = await self._post_for_token(
                json_data={"identity": self._identity, "password": self._password}
            )
            self._state = TokenState(token=token, fetched_at=time.monotonic(), valid=True)
            logger.debug("Password authentication succeeded.")


def strategy_from_credential(
    credential: Credential,
    *,
    http_client: httpx.AsyncClient | None = None,
    freshness_window: float = 0.0,
) -> AuthStrategy:
    """Builds the strategy matching a credential variant.

    Args:
        credential: The credential to authenticate with.
        http_client: Optional client the strategy borrows for auth calls.
        freshness_window: Passed to :class:`EmailPasswordAuth`.

    Returns:
        A new strategy instance.
    """
    if isinstance(credential, EmailPasswordCredential):
        return EmailPasswordAuth(
            credential.endpoint,
            credential.identity,
            credential.password,
            freshness_window=freshness_window,
            http_client=http_client,
        )
    if isinstance(credential, StaticTokenCredential):
        return TokenRefreshAuth(
            credential.endpoint, credential.token, http_client=http_client
        )
    if isinstance(credential, NoCredential):
        return NoAuth()
    raise ConfigurationError(f"Unsupported credential type: {type(credential).__name__}")
