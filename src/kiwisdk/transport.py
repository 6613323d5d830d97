"""HTTP transport used by :class:`kiwisdk.client.KiwiClient`.

The transport sends one request and returns whatever response arrives. It
retries only when no response arrived at all (connection errors, timeouts);
status codes are the caller's business.
"""

import ssl

import certifi
import httpx
import tenacity
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import ClientSettings
from .exceptions import NetworkError, TimeoutError, TransportError
from .log_config import logger
from .types import RequestData


class HttpTransport:
    """Wraps an httpx.AsyncClient with retries on transport failures.

    Attributes:
        _settings: Timeout and retry configuration.
        _http_client: The underlying httpx.AsyncClient.
        _should_close_client: Whether this transport created (and so owns) the client.
    """

    def __init__(
        self,
        settings: ClientSettings,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._settings = settings
        self._should_close_client = http_client is None
        self._http_client = http_client or self._create_default_http_client()

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._http_client

    def _create_default_http_client(self) -> httpx.AsyncClient:
        """Create a default httpx.AsyncClient with configured settings.

        Returns:
            httpx.AsyncClient: Configured HTTP client with SSL verification,
                timeout settings, and user agent header.
        """
        try:
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            verify_ssl: ssl.SSLContext | bool = ssl_context
            logger.debug("Using certifi SSL context.")
        except (OSError, ssl.SSLError):
            verify_ssl = True
            logger.warning(
                "certifi bundle failed to load. Using default SSL verification."
            )

        return httpx.AsyncClient(
            timeout=self._settings.request_timeout,
            verify=verify_ssl,
            headers={"User-Agent": self._settings.user_agent},
        )

    async def _send_once(self, request_data: RequestData) -> httpx.Response:
        request = request_data.build_request(self._http_client)
        logger.debug(f"Sending request: {request.method} {request.url}")
        try:
            response = await self._http_client.send(request)
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {request.url}")
            raise TimeoutError("Request timed out", request=request) from e
        except httpx.NetworkError as e:
            logger.error(f"Network error occurred for {request.url}: {e}")
            raise NetworkError(
                f"Network error for {request.url}: {e}", request=request
            ) from e
        except httpx.RequestError as e:
            logger.error(f"HTTP request error for {request.url}: {e}")
            raise TransportError(
                f"HTTP request error for {request.url}: {e}", request=request
            ) from e
        logger.debug(f"Received response: {response.status_code} for {request.url}")
        logger.trace(f"Response Headers: {response.headers}")
        return response

    async def _before_retry_sleep(self, retry_state: tenacity.RetryCallState) -> None:
        """Log details before tenacity sleeps between retries."""
        if not retry_state.outcome:
            return
        exc = retry_state.outcome.exception()
        sleep_time = (
            getattr(retry_state.next_action, "sleep", 0)
            if retry_state.next_action
            else 0
        )
        logger.warning(
            f"Retrying request in {sleep_time:.2f} seconds after "
            f"{retry_state.attempt_number} attempt(s) due to: {type(exc).__name__} - {exc}"
        )

    async def send(self, request_data: RequestData) -> httpx.Response:
        """Send a request, retrying transport failures up to ``max_retries`` times.

        Args:
            request_data: The fully built request (URL, params, body, headers).

        Returns:
            httpx.Response: The first response received, whatever its status.

        Raises:
            TransportError: If every attempt failed without a response.
        """
        retry_strategy = AsyncRetrying(
            stop=stop_after_attempt(self._settings.max_retries + 1),
            wait=wait_exponential(
                multiplier=self._settings.retry_wait_seconds,
                max=self._settings.retry_max_wait_seconds,
            ),
            retry=retry_if_exception_type(TransportError),
            reraise=True,
            before_sleep=self._before_retry_sleep,
        )
        return await retry_strategy(self._send_once, request_data)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this transport created it."""
        if self._should_close_client and not self._http_client.is_closed:
            await self._http_client.aclose()
            logger.debug("HttpTransport internal HTTP client closed.")
