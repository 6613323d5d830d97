# kiwisdk/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = "kiwisdk/0.1.0"


class ClientSettings(BaseSettings):
    """
    Settings for :class:`kiwisdk.client.KiwiClient`, loaded from environment
    variables prefixed with ``KIWI_`` or from a .env / secrets.env file.

    Transport behaviour (timeouts, retries) lives here together with optional
    credentials. Credentials found here are only used when the client is not
    given an explicit strategy or auth option.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "secrets.env"),
        env_file_encoding="utf-8",
        env_prefix="KIWI_",
        extra="ignore",
        case_sensitive=False,
    )

    # --- Transport Settings ---
    request_timeout: float = Field(
        default=30.0, description="Default request timeout in seconds"
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        description="Retries after a transport failure (connection, timeout)",
    )
    retry_wait_seconds: float = Field(
        default=3.0, description="Initial wait between transport retries"
    )
    retry_max_wait_seconds: float = Field(
        default=10.0, description="Upper bound for the wait between retries"
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header for requests",
    )
    debug_logging: bool = Field(
        default=False,
        description="Dump every request and response at INFO level",
    )

    # --- Authentication Settings ---
    auth_freshness_seconds: float = Field(
        default=0.0,
        ge=0.0,
        description="Reuse a password-auth token younger than this; 0 re-auths on every call",
    )
    admin_email: str | None = Field(default=None, description="Admin login email")
    admin_password: str | None = Field(default=None, description="Admin password")
    user_email: str | None = Field(default=None, description="User login email")
    user_password: str | None = Field(default=None, description="User password")
    admin_token: str | None = Field(default=None, description="Static admin token")
    user_token: str | None = Field(default=None, description="Static user token")


@lru_cache
def get_settings() -> ClientSettings:
    """
    Provides access to the client settings.

    Settings are loaded from environment variables or .env/secrets.env files.
    The instance is cached for performance.

    Returns:
        ClientSettings: The settings instance.
    """
    return ClientSettings()
