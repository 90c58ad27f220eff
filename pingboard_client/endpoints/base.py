"""Base class for API endpoints.

This module provides the base class that all endpoint groups inherit
from. It gives them the request executor plus helpers for cached lookups
and paginated listings.

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from pingboard_client.models import ResourceLookup, ResourceQuery, validate_params
from pingboard_client.utils.pagination import collect_pages

if TYPE_CHECKING:
    from pingboard_client.utils.http import HTTPClient

logger = logging.getLogger(__name__)


class BaseEndpoint:
    """Base class for API endpoint groups.

    Subclasses set ``resource`` to the collection name, which is both the
    URL segment and the envelope field holding the items.

    Attributes:
        _http: The HTTP client for making requests.

    """

    __slots__ = ("_http",)

    resource: ClassVar[str] = ""

    def __init__(self, http: HTTPClient) -> None:
        """Initialize the endpoint with the HTTP client."""
        self._http = http

    @classmethod
    def cache_key(cls, object_id: int) -> str:
        """Cache key for a single resource, e.g. ``users/42``."""
        return f"{cls.resource}/{object_id}"

    def _get_by_id(self, object_id: int) -> Any | None:
        """Fetch one resource by id, consulting the cache first.

        Raises:
            ConfigurationError: If object_id is not a positive integer.

        """
        params = validate_params(ResourceLookup, id=object_id)
        key = self.cache_key(params.id)

        cache = self._http.cache
        if cache is not None:
            cached = cache.get(key)
            if cached is not None:
                logger.debug("Using cached %s", key)
                return cached

        data = self._http.get(f"/{key}")

        if cache is not None and data is not None:
            cache.set(key, data)
        return data

    def _list(self, object_id: int | None = None, size: int | None = None) -> list[Any]:
        """List the resource, optionally one id, optionally capped.

        Raises:
            ConfigurationError: If object_id or size is not a positive integer.

        """
        params = validate_params(ResourceQuery, id=object_id, size=size)
        path = f"/{self.resource}"
        if params.id is not None:
            path += f"/{params.id}"
        return collect_pages(self._http, path, self.resource, size=params.size)
