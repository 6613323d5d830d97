"""Exception hierarchy for kiwisdk.

Every failure raised by the client is a :class:`KiwiError`. The subclasses
tell callers which layer failed so they can pick a retry policy:

- :class:`AuthError` - the auth endpoint refused the credential or was unreachable.
- :class:`TransportError` - no HTTP response was received at all.
- :class:`BackendError` - a response arrived with an error status.
- :class:`DecodeError` - a successful response could not be parsed.
"""

import httpx


class KiwiError(Exception):
    """Base exception class for all kiwisdk errors."""

    def __init__(
        self,
        message: str,
        *,
        response: httpx.Response | None = None,
        request: httpx.Request | None = None,
    ):
        """Initializes the base exception.

        Args:
            message: The error message.
            response: Optional httpx.Response object associated with the error.
            request: Optional httpx.Request object associated with the error.
        """
        super().__init__(message)
        self.message = message
        self.response = response
        self.request = request

    @property
    def status_code(self) -> int | None:
        """HTTP status of the attached response, if any."""
        if self.response is None:
            return None
        return self.response.status_code

    @property
    def body(self) -> str | None:
        """Raw text of the attached response, if any."""
        if self.response is None:
            return None
        return self.response.text

    def __str__(self) -> str:
        if self.response is not None:
            try:
                url_info = self.response.request.url
            except RuntimeError:
                # Response was built without a request (e.g. in tests)
                url_info = "N/A"
            return (
                f"{self.message} (Status: {self.response.status_code}, URL: {url_info})"
            )
        if isinstance(self.request, httpx.Request):
            return f"{self.message} (URL: {self.request.url})"
        return self.message


class ConfigurationError(KiwiError):
    """Represents an error in how the client or a strategy was constructed."""

    def __init__(self, message: str):
        super().__init__(message, response=None)


class ValidationError(KiwiError):
    """Raised for client-side input problems detected before any request is sent."""


class AuthError(KiwiError):
    """Raised when obtaining or refreshing a token fails.

    When the auth endpoint answered, ``status_code`` and ``body`` carry its reply.
    """


class TransportError(KiwiError):
    """The HTTP exchange itself failed (connection refused, DNS, timeout...)."""

    def __init__(self, message: str, *, request: httpx.Request | None = None):
        super().__init__(message, request=request, response=None)


class TimeoutError(TransportError):
    """The request did not complete within the configured timeout."""


class NetworkError(TransportError):
    """A connection to the server could not be established or was lost."""


class BackendError(KiwiError):
    """The backend answered with a non-success status (>= 400)."""


class NotFoundError(BackendError):
    """The backend answered 404 Not Found."""


class DecodeError(KiwiError):
    """A response body could not be decoded into the expected shape.

    The HTTP exchange succeeded, so ``response`` is always attached.
    """
