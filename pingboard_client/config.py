"""Configuration management for the Pingboard Client.

This module provides a flexible configuration system that supports:
- Programmatic configuration via constructor arguments
- Environment variable overrides
- Sensible defaults for all options

Configuration Precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables
    3. Default values

Environment Variables:
    PINGBOARD_ACCESS_TOKEN: OAuth access token (required)
    PINGBOARD_API_URL: API base URL (default: https://app.pingboard.com/api/v2)
    PINGBOARD_TIMEOUT: Request timeout in seconds (default: 30)
    PINGBOARD_DEFAULT_BACKOFF: Seconds to wait before a retry (default: 10)
    PINGBOARD_MAX_TRIES: Maximum attempts per request (default: unlimited)
    PINGBOARD_USERNAME / PINGBOARD_PASSWORD: Accepted but not used yet

Example:
    >>> # Token from the environment
    >>> config = ClientConfig()
    >>>
    >>> # Override specific settings
    >>> config = ClientConfig(access_token="abc", max_tries=3, default_backoff=2)

"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, TypeVar

from dotenv import load_dotenv

from pingboard_client.exceptions import ConfigurationError
from pingboard_client.utils.retry import DEFAULT_RETRY_ON_STATUS, RetryPolicy

# Auto-load .env file if it exists (searches current dir and parents)
_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    load_dotenv()

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Immutable configuration for the Pingboard API client.

    Attributes:
        base_url: Pingboard API base URL, without trailing slash.
        access_token: Pre-obtained OAuth bearer token.
        timeout: Request timeout in seconds, handed to httpx.
        default_backoff: Seconds to sleep before retrying a request. A 429
            response with a numeric Retry-After header overrides it.
        retry_on_status: HTTP status codes that trigger a retry.
        max_tries: Maximum attempts per request, None for unlimited.
        username: Reserved for password login, not used by any request.
        password: Reserved for password login, not used by any request.
        user_agent: User-Agent header for requests.

    """

    DEFAULT_BASE_URL: ClassVar[str] = "https://app.pingboard.com/api/v2"
    DEFAULT_TIMEOUT: ClassVar[float] = 30.0
    DEFAULT_BACKOFF: ClassVar[int] = 10

    base_url: str = field(
        default_factory=lambda: _get_env("PINGBOARD_API_URL", ClientConfig.DEFAULT_BASE_URL)
    )
    access_token: str | None = field(
        default_factory=lambda: _get_env_optional("PINGBOARD_ACCESS_TOKEN")
    )
    timeout: float = field(
        default_factory=lambda: _convert_env(
            "PINGBOARD_TIMEOUT",
            _get_env("PINGBOARD_TIMEOUT", str(ClientConfig.DEFAULT_TIMEOUT)),
            float,
        )
    )
    default_backoff: int = field(
        default_factory=lambda: _convert_env(
            "PINGBOARD_DEFAULT_BACKOFF",
            _get_env("PINGBOARD_DEFAULT_BACKOFF", str(ClientConfig.DEFAULT_BACKOFF)),
            int,
        )
    )
    retry_on_status: tuple[int, ...] = DEFAULT_RETRY_ON_STATUS
    max_tries: int | None = field(
        default_factory=lambda: _get_env_int_optional("PINGBOARD_MAX_TRIES")
    )
    username: str | None = field(default_factory=lambda: _get_env_optional("PINGBOARD_USERNAME"))
    password: str | None = field(
        default_factory=lambda: _get_env_optional("PINGBOARD_PASSWORD"), repr=False
    )
    user_agent: str = "python-pingboard-client/1.0"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate all configuration values.

        Raises:
            ConfigurationError: If any configuration value is invalid.

        """
        if not self.access_token or not self.access_token.strip():
            raise ConfigurationError(
                "access_token is required (pass it or set PINGBOARD_ACCESS_TOKEN)"
            )

        if not self.base_url:
            raise ConfigurationError("base_url cannot be empty")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"Invalid base_url: {self.base_url} (must start with http:// or https://)"
            )

        # Remove trailing slash for consistency
        if self.base_url.endswith("/"):
            object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

        # Lists are accepted for convenience but stored as a tuple
        if not isinstance(self.retry_on_status, tuple):
            object.__setattr__(self, "retry_on_status", tuple(self.retry_on_status))

        # RetryPolicy owns the backoff and max_tries rules
        _ = self.retry_policy

    @property
    def retry_policy(self) -> RetryPolicy:
        """The retry policy described by this configuration."""
        return RetryPolicy(
            retry_on_status=self.retry_on_status,
            default_backoff=self.default_backoff,
            max_tries=self.max_tries,
        )

    def with_overrides(self, **kwargs: object) -> ClientConfig:
        """Create a new configuration with specified overrides.

        Args:
            **kwargs: Configuration values to override.

        Returns:
            A new ClientConfig with the specified overrides.

        Example:
            >>> base_config = ClientConfig(access_token="abc")
            >>> impatient = base_config.with_overrides(max_tries=1)

        """
        current_values: dict[str, object] = {
            "base_url": self.base_url,
            "access_token": self.access_token,
            "timeout": self.timeout,
            "default_backoff": self.default_backoff,
            "retry_on_status": self.retry_on_status,
            "max_tries": self.max_tries,
            "username": self.username,
            "password": self.password,
            "user_agent": self.user_agent,
        }
        current_values.update(kwargs)
        return ClientConfig(**current_values)  # type: ignore[arg-type]


def _get_env(key: str, default: str) -> str:
    """Get environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set.

    Returns:
        The environment variable value or default.

    """
    value = os.environ.get(key)
    if value is None or value == "":
        return default
    return value


def _get_env_optional(key: str) -> str | None:
    """Get optional environment variable, treating empty as unset."""
    value = os.environ.get(key)
    if value is None or value == "":
        return None
    return value


def _get_env_int_optional(key: str) -> int | None:
    value = _get_env_optional(key)
    return _convert_env(key, value, int) if value is not None else None


def _convert_env(key: str, value: str, cast: Callable[[str], T]) -> T:
    """Convert an environment string, reporting bad values as ConfigurationError."""
    try:
        return cast(value)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be a {cast.__name__}, got {value!r}") from e
