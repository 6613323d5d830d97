"""kiwisdk: asynchronous client for collection-based record backends.

The package provides a record client whose every call is gated by a pluggable
authentication strategy (no auth, a refreshed static token, or email/password
login), a typed per-collection view, and a small builder for the backend's
filter expressions.
"""

__version__ = "0.1.0"

from . import (
    auth,
    client,
    collection,
    config,
    exceptions,
    filter,
    log_config,
    models,
    options,
)
from .auth import (
    Credential,
    EmailPasswordAuth,
    EmailPasswordCredential,
    NoAuth,
    NoCredential,
    StaticTokenCredential,
    TokenRefreshAuth,
    strategy_from_credential,
)
from .client import KiwiClient
from .collection import Collection, default_collection
from .config import ClientSettings, get_settings
from .exceptions import (
    AuthError,
    BackendError,
    ConfigurationError,
    DecodeError,
    KiwiError,
    NetworkError,
    NotFoundError,
    TimeoutError,
    TransportError,
    ValidationError,
)
from .filter import Filter, build_filter
from .models import CreateResult, ListOptions, ListResult
from .options import (
    with_admin_email_password,
    with_admin_token,
    with_collection_auth,
    with_credential,
    with_debug,
    with_user_email_password,
    with_user_token,
)

__all__ = [
    "__version__",
    "auth",
    "client",
    "collection",
    "config",
    "exceptions",
    "filter",
    "log_config",
    "models",
    "options",
    "AuthError",
    "BackendError",
    "ClientSettings",
    "Collection",
    "ConfigurationError",
    "CreateResult",
    "Credential",
    "DecodeError",
    "EmailPasswordAuth",
    "EmailPasswordCredential",
    "Filter",
    "KiwiClient",
    "KiwiError",
    "ListOptions",
    "ListResult",
    "NetworkError",
    "NoAuth",
    "NoCredential",
    "NotFoundError",
    "StaticTokenCredential",
    "TimeoutError",
    "TokenRefreshAuth",
    "TransportError",
    "ValidationError",
    "build_filter",
    "default_collection",
    "get_settings",
    "strategy_from_credential",
    "with_admin_email_password",
    "with_admin_token",
    "with_collection_auth",
    "with_credential",
    "with_debug",
    "with_user_email_password",
    "with_user_token",
]
