"""Asynchronous client for the record backend.

This module provides :class:`KiwiClient`, which owns an HTTP transport, a
base URL and exactly one authentication strategy. Every record operation
first asks the strategy for a valid token and only then touches the network,
so an authentication failure never results in a half-sent request.
"""

from http import HTTPStatus
from typing import Any, Self, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from . import endpoints
from .auth import AuthStrategy, NoAuth
from .collection import Collection
from .config import ClientSettings, get_settings
from .exceptions import (
    AuthError,
    BackendError,
    ConfigurationError,
    DecodeError,
    KiwiError,
    NotFoundError,
)
from .log_config import logger
from .models import CreateResult, ListOptions, ListResult, Record
from .options import (
    with_admin_email_password,
    with_admin_token,
    with_user_email_password,
    with_user_token,
)
from .transport import HttpTransport
from .types import ClientOption, RequestData

ModelT = TypeVar("ModelT", bound=BaseModel)


class KiwiClient:
    """Asynchronous client for collection-based record endpoints.

    The authentication strategy is fixed once ``__init__`` returns. It is
    resolved in this order:

    1. ``auth_strategy`` if given, otherwise credentials found in ``settings``
       (admin email/password, user email/password, admin token, user token),
       otherwise no authentication;
    2. then each positional option is applied in order, and an auth option
       replaces whatever strategy was installed before it.

    Typical usage:
    ```python
    async with KiwiClient(
        "https://kiwi.example.com", with_admin_email_password("a@b.c", "pw")
    ) as client:
        page = await client.list(
            "posts", ListOptions(filter=Filter("author = {:id}", {"id": "x1"}))
        )
    ```

    Attributes:
        _settings: Transport and credential settings.
        _base_url: Base URL of the backend, without trailing slash.
        _transport: Sends requests and retries transport failures.
        _auth_strategy: The strategy consulted before every request.
        _debug: Dump requests and responses at INFO level.
    """

    def __init__(
        self,
        base_url: str,
        *options: ClientOption,
        settings: ClientSettings | None = None,
        auth_strategy: AuthStrategy | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initializes the KiwiClient.

        Args:
            base_url: Base URL of the backend, e.g. ``https://kiwi.example.com``.
            *options: Construction-time options from :mod:`kiwisdk.options`.
            settings: Optional settings; global settings are used if None.
            auth_strategy: Optional explicit strategy, overriding credentials in settings.
            http_client: Optional pre-configured httpx.AsyncClient. It is
                borrowed and not closed by :meth:`aclose`.
        """
        if not base_url:
            raise ConfigurationError("KiwiClient requires a non-empty 'base_url'.")
        self._settings: ClientSettings = settings or get_settings()
        self._base_url: str = base_url.rstrip("/")
        self._debug: bool = self._settings.debug_logging
        self._transport = HttpTransport(self._settings, http_client)

        self._configuring = True
        self._auth_strategy: AuthStrategy = NoAuth()
        if auth_strategy is not None:
            logger.info(
                f"Using explicitly provided authentication strategy: {type(auth_strategy).__name__}"
            )
            self._auth_strategy = auth_strategy
        else:
            self._apply_settings_credentials()
        for option in options:
            option(self)
        self._configuring = False

        logger.info(
            f"Using authentication strategy: {type(self._auth_strategy).__name__}"
        )
        logger.debug(f"KiwiClient initialized for {self._base_url}.")

    def _apply_settings_credentials(self) -> None:
        """Installs a strategy from credentials found in the settings, if any."""
        s = self._settings
        if s.admin_email and s.admin_password:
            logger.info("Using admin email/password from settings.")
            with_admin_email_password(s.admin_email, s.admin_password)(self)
        elif s.user_email and s.user_password:
            logger.info("Using user email/password from settings.")
            with_user_email_password(s.user_email, s.user_password)(self)
        elif s.admin_token:
            logger.info("Using admin token from settings.")
            with_admin_token(s.admin_token)(self)
        elif s.user_token:
            logger.info("Using user token from settings.")
            with_user_token(s.user_token)(self)
        else:
            logger.info("No credentials found in settings, using NoAuth.")

    def _install_auth_strategy(self, strategy: AuthStrategy) -> None:
        """Replaces the strategy; only allowed while the client is being constructed."""
        if not self._configuring:
            raise ConfigurationError(
                "The authentication strategy cannot be changed after construction."
            )
        self._auth_strategy = strategy

    def _enable_debug(self) -> None:
        self._debug = True

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def http_client(self) -> httpx.AsyncClient:
        """The httpx client requests are sent with; auth options borrow it too."""
        return self._transport.http_client

    @property
    def auth_strategy(self) -> AuthStrategy:
        """The strategy consulted before every request."""
        return self._auth_strategy

    def url(self, path: str) -> str:
        """Joins a backend path onto the base URL."""
        return f"{self._base_url}/{path.lstrip('/')}"

    async def authorize(self) -> None:
        """Runs the authentication strategy.

        Raises:
            AuthError: If the strategy could not obtain a valid token.
        """
        try:
            await self._auth_strategy.async_authorize()
        except AuthError as e:
            logger.error(f"Authentication failed before request: {e}")
            raise
        except KiwiError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error during authentication: {e}")
            raise AuthError(f"Unexpected authentication error: {e}") from e

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json_data: Any | None = None,
    ) -> httpx.Response:
        """Authorizes, sends one request and classifies error statuses.

        Args:
            operation: Short name used in log and error messages, e.g. "list".
            method: HTTP method.
            path: Backend path relative to the base URL.
            params: Query parameters.
            json_data: JSON body.

        Returns:
            httpx.Response: A response with a success status.

        Raises:
            AuthError: If authorization failed; nothing was sent.
            TransportError: If no response could be obtained.
            NotFoundError: If the backend answered 404.
            BackendError: If the backend answered with another status >= 400.
        """
        await self.authorize()

        headers = {"Content-Type": "application/json"}
        token = self._auth_strategy.current_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        request_data = RequestData(
            method=method,
            url=self.url(path),
            params=params or None,
            json_data=json_data,
            headers=headers,
        )
        if self._debug:
            logger.info(
                f"[{operation}] request: {method} {request_data.url} "
                f"params={params or {}} body={json_data!r}"
            )

        response = await self._transport.send(request_data)

        if self._debug:
            logger.info(
                f"[{operation}] response: {response.status_code} body={response.text}"
            )

        if response.status_code >= HTTPStatus.BAD_REQUEST:
            error_cls = (
                NotFoundError
                if response.status_code == HTTPStatus.NOT_FOUND
                else BackendError
            )
            logger.error(
                f"[{operation}] backend returned status {response.status_code} "
                f"for {method} {request_data.url}"
            )
            raise error_cls(
                f"[{operation}] backend returned status {response.status_code}: {response.text}",
                response=response,
            )
        return response

    def _decode_json(self, operation: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"[{operation}] response body is not valid JSON: {e}")
            raise DecodeError(
                f"[{operation}] can't decode response body: {e}", response=response
            ) from e

    def _decode_model(
        self, operation: str, response: httpx.Response, model: type[ModelT]
    ) -> ModelT:
        data = self._decode_json(operation, response)
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            logger.error(
                f"[{operation}] response does not match {model.__name__}: {e}"
            )
            raise DecodeError(
                f"[{operation}] can't decode response into {model.__name__}: {e}",
                response=response,
            ) from e

    @staticmethod
    def _serialize_body(body: Any) -> Any:
        if isinstance(body, BaseModel):
            return body.model_dump(mode="json", by_alias=True)
        return body

    async def create(self, collection: str, body: Any) -> CreateResult:
        """Creates a record.

        Args:
            collection: Collection name.
            body: Record fields, as a dict or a pydantic model.

        Returns:
            CreateResult: Identity and metadata assigned by the backend.
        """
        response = await self._send(
            "create",
            "POST",
            endpoints.records_path(collection),
            json_data=self._serialize_body(body),
        )
        return self._decode_model("create", response, CreateResult)

    async def update(self, collection: str, record_id: str, body: Any) -> None:
        """Updates the given fields of a record."""
        await self._send(
            "update",
            "PATCH",
            endpoints.record_path(collection, record_id),
            json_data=self._serialize_body(body),
        )

    async def delete(self, collection: str, record_id: str) -> None:
        """Deletes a record."""
        await self._send(
            "delete", "DELETE", endpoints.record_path(collection, record_id)
        )

    async def get_one(
        self,
        collection: str,
        record_id: str,
        *,
        response_model: type[ModelT] | None = None,
    ) -> ModelT | Record:
        """Fetches a single record.

        Args:
            collection: Collection name.
            record_id: Id of the record.
            response_model: Optional model to decode the record into.

        Returns:
            The record as ``response_model``, or as a plain dict if None.

        Raises:
            NotFoundError: If the record does not exist.
            DecodeError: If the body is not a JSON object or does not validate.
        """
        response = await self._send(
            "one", "GET", endpoints.record_path(collection, record_id)
        )
        if response_model is not None:
            return self._decode_model("one", response, response_model)
        data = self._decode_json("one", response)
        if not isinstance(data, dict):
            raise DecodeError(
                f"[one] expected a JSON object, got {type(data).__name__}",
                response=response,
            )
        return data

    async def list(
        self,
        collection: str,
        options: ListOptions | None = None,
        *,
        response_model: type[ModelT] | None = None,
    ) -> ModelT | ListResult[Record]:
        """Fetches one page of records.

        Only the options that are set are sent: ``page``, ``perPage``,
        ``filter`` and ``sort``.

        Args:
            collection: Collection name.
            options: Paging, filter and sort options.
            response_model: Optional decode target replacing the default
                ``ListResult[dict]``; the request itself is unchanged.

        Returns:
            The decoded page.
        """
        params = options.to_query_params() if options is not None else {}
        logger.debug(f"Listing {collection} with params: {params}")
        response = await self._send(
            "list", "GET", endpoints.records_path(collection), params=params
        )
        target = response_model or ListResult[Record]
        return self._decode_model("list", response, target)

    def collection(
        self, name: str, model: type[ModelT] | None = None
    ) -> Collection[Any]:
        """Returns a :class:`kiwisdk.collection.Collection` bound to this client.

        Args:
            name: Collection name.
            model: Record model; records stay plain dicts if None.
        """
        return Collection(self, name, model)

    async def aclose(self) -> None:
        """Close the transport's HTTP client and any client the auth strategy created.

        This method should be called when the client is no longer needed.
        """
        await self._transport.aclose()
        await self._auth_strategy.async_close()
        logger.debug("KiwiClient closed.")

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        await self.aclose()
