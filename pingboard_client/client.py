"""Main Pingboard Client class.

This module provides the main entry point for the Pingboard API client.
The PingboardClient class wires configuration, authentication, the request
executor and the endpoint groups together.

Example:
    >>> from pingboard_client import PingboardClient
    >>>
    >>> client = PingboardClient(access_token="abc123", max_tries=5)
    >>> user = client.get_user(42)
    >>> statuses = client.get_statuses(size=100)

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pingboard_client.auth import TokenAuth
from pingboard_client.config import ClientConfig
from pingboard_client.endpoints.groups import GroupsEndpoint
from pingboard_client.endpoints.statuses import StatusesEndpoint
from pingboard_client.endpoints.users import UsersEndpoint
from pingboard_client.exceptions import ConfigurationError
from pingboard_client.utils.http import HTTPClient

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx

    from pingboard_client.utils.cache import CacheBackend

logger = logging.getLogger(__name__)


class PingboardClient:
    """Pingboard API client with typed endpoints.

    Attributes:
        users: User-related API endpoints.
        statuses: Status-related API endpoints.
        groups: Group-related API endpoints.

    Example:
        >>> client = PingboardClient(access_token="abc123")
        >>>
        >>> # Flat helpers
        >>> envelope = client.get_user(42)
        >>> everything = client.get_statuses()
        >>>
        >>> # Endpoint groups
        >>> groups = client.groups.list(size=10)
        >>>
        >>> client.close()

    Context Manager:
        >>> with PingboardClient(access_token="abc123") as client:
        ...     user = client.get_user(42)

    """

    __slots__ = ("_config", "_groups", "_http", "_statuses", "_users")

    def __init__(
        self,
        access_token: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        default_backoff: int | None = None,
        retry_on_status: Iterable[int] | None = None,
        max_tries: int | None = None,
        cache: CacheBackend | None = None,
        http_client: httpx.Client | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        """Initialize the Pingboard client.

        Args:
            access_token: OAuth access token. Falls back to the
                PINGBOARD_ACCESS_TOKEN environment variable.
            base_url: API base URL. Defaults to https://app.pingboard.com/api/v2.
            timeout: Request timeout in seconds. Default 30.
            default_backoff: Seconds between retries. Default 10.
            retry_on_status: Status codes to retry. Default 429, 500, 502, 503, 504.
            max_tries: Maximum attempts per request. Default unlimited.
            cache: Optional cache backend for single-resource lookups.
            http_client: Pre-built httpx client to reuse for all requests.
            config: A complete ClientConfig; keyword overrides apply on top.

        Raises:
            ConfigurationError: If no access token is available or a setting
                is invalid.

        """
        overrides: dict[str, object] = {}
        if access_token is not None:
            overrides["access_token"] = access_token
        if base_url is not None:
            overrides["base_url"] = base_url
        if timeout is not None:
            overrides["timeout"] = timeout
        if default_backoff is not None:
            overrides["default_backoff"] = default_backoff
        if retry_on_status is not None:
            overrides["retry_on_status"] = tuple(retry_on_status)
        if max_tries is not None:
            overrides["max_tries"] = max_tries

        if config is None:
            self._config = ClientConfig(**overrides)  # type: ignore[arg-type]
        elif overrides:
            self._config = config.with_overrides(**overrides)
        else:
            self._config = config

        auth = TokenAuth(self._config.access_token)
        self._http = HTTPClient(self._config, auth, client=http_client, cache=cache)

        self._users = UsersEndpoint(self._http)
        self._statuses = StatusesEndpoint(self._http)
        self._groups = GroupsEndpoint(self._http)

    # =========================================================================
    # Endpoint Properties
    # =========================================================================

    @property
    def users(self) -> UsersEndpoint:
        """Access user-related API endpoints."""
        return self._users

    @property
    def statuses(self) -> StatusesEndpoint:
        """Access status-related API endpoints."""
        return self._statuses

    @property
    def groups(self) -> GroupsEndpoint:
        """Access group-related API endpoints."""
        return self._groups

    # =========================================================================
    # Resource Methods
    # =========================================================================

    def get_user(self, id: int) -> Any | None:  # noqa: A002
        """Get a single user by id.

        Args:
            id: The Pingboard user id, a positive integer.

        Returns:
            The decoded response envelope.

        """
        return self._users.get(id)

    def get_statuses(self, id: int | None = None, size: int | None = None) -> list[Any]:  # noqa: A002
        """List statuses, optionally a single id, optionally capped.

        Args:
            id: Only fetch the status with this id.
            size: Stop fetching pages once this many statuses are collected.

        Returns:
            Status objects in page order.

        """
        return self._statuses.list(id=id, size=size)

    def clear_cache_object_id(self, object_id: str) -> bool:
        """Remove one object from the cache.

        Single-resource lookups are cached under ``<resource>/<id>``, for
        example ``users/42``.

        Args:
            object_id: The cache key to remove.

        Returns:
            Whether an entry was removed. Always False without a cache.

        Raises:
            ConfigurationError: If object_id is not a string.

        """
        if not isinstance(object_id, str):
            raise ConfigurationError(
                f"object_id must be a string, got {type(object_id).__name__}"
            )

        logger.debug("Clearing cache id: %s", object_id)
        cache = self._http.cache
        if cache is None:
            return False
        return cache.delete(object_id)

    # =========================================================================
    # Client Properties
    # =========================================================================

    @property
    def config(self) -> ClientConfig:
        """Get the immutable client configuration."""
        return self._config

    @property
    def cache(self) -> CacheBackend | None:
        """Get the cache backend, or None if caching is off."""
        return self._http.cache

    # =========================================================================
    # Lifecycle Methods
    # =========================================================================

    def init(self) -> None:
        """Build the HTTP transport and default headers now.

        They are otherwise created lazily by the first request; building
        them up front keeps construction errors out of later calls.

        """
        self._http.init()

    def close(self) -> None:
        """Close the client and release resources.

        A caller-supplied httpx client is left open.

        """
        self._http.close()

    def __enter__(self) -> PingboardClient:
        """Enter context manager."""
        return self

    def __exit__(self, *args: object) -> None:
        """Exit context manager and close the client."""
        self.close()

    def __repr__(self) -> str:
        """Return a string representation of the client."""
        return f"PingboardClient(base_url={self._config.base_url!r})"
