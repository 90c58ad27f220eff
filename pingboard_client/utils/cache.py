"""Pluggable response cache.

The client only ever talks to a cache through the CacheBackend protocol,
so any object with get/set/delete works: a wrapper around a file cache, a
redis client, or the in-memory ResponseCache below.

Features of ResponseCache:
    - TTL-based expiration (None keeps entries forever)
    - Thread-safe operations

"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class CacheBackend(Protocol):
    """Key-value store used to avoid redundant requests."""

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None on a miss."""

    def set(self, key: str, value: Any) -> None:
        """Store a value under key."""

    def delete(self, key: str) -> bool:
        """Remove key, returning whether something was removed."""


@dataclass
class CacheEntry:
    """A cached value with metadata.

    Attributes:
        data: The cached response data.
        expires_at: Unix timestamp when entry expires, None for never.
        created_at: Unix timestamp when entry was created.

    """

    data: Any
    expires_at: float | None
    created_at: float = field(default_factory=time.time)

    @property
    def is_expired(self) -> bool:
        """Check if the entry has expired."""
        return self.expires_at is not None and time.time() > self.expires_at


class ResponseCache:
    """In-memory cache for decoded API responses.

    Example:
        >>> cache = ResponseCache(default_ttl=300)
        >>> cache.set("users/42", {"users": [...]})
        >>> cache.get("users/42")
        {'users': [...]}
        >>> cache.delete("users/42")
        True

    """

    __slots__ = ("_cache", "_default_ttl", "_lock")

    def __init__(self, default_ttl: int | None = 300) -> None:
        """Initialize the cache.

        Args:
            default_ttl: Default time-to-live in seconds, None for no expiry.

        """
        self._default_ttl = default_ttl
        self._cache: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        """Get a cached value if present and not expired."""
        with self._lock:
            entry = self._cache.get(key)

            if entry is None:
                return None

            if entry.is_expired:
                del self._cache[key]
                logger.debug("Cache expired: %s", key)
                return None

            logger.debug("Cache hit: %s", key)
            return entry.data

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store a value in the cache.

        Args:
            key: The cache key.
            value: The data to cache.
            ttl: Time-to-live in seconds (uses default if None).

        """
        actual_ttl = ttl if ttl is not None else self._default_ttl
        expires_at = time.time() + actual_ttl if actual_ttl is not None else None

        with self._lock:
            self._cache[key] = CacheEntry(data=value, expires_at=expires_at)

        logger.debug("Cache set: %s (TTL: %s)", key, actual_ttl)

    def delete(self, key: str) -> bool:
        """Remove a specific entry from the cache.

        Returns:
            True if entry was removed, False if not found.

        """
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                logger.debug("Cache invalidated: %s", key)
                return True
            return False

    def clear(self) -> int:
        """Remove all entries, returning how many there were."""
        with self._lock:
            count = len(self._cache)
            self._cache.clear()

        logger.debug("Cache cleared: %d entries", count)
        return count

    @property
    def size(self) -> int:
        """Get the number of cached entries."""
        with self._lock:
            return len(self._cache)

    def __repr__(self) -> str:
        """Return a string representation."""
        return f"ResponseCache(size={self.size}, default_ttl={self._default_ttl})"
