"""Statuses endpoint implementation.

Statuses are the out-of-office, working-remotely, etc. entries people
post on Pingboard.

API Reference: https://pingboard.docs.apiary.io/#reference/statuses

"""

from __future__ import annotations

from typing import Any

from pingboard_client.endpoints.base import BaseEndpoint


class StatusesEndpoint(BaseEndpoint):
    """Endpoint for status-related API calls.

    Example:
        >>> statuses = client.statuses.list(size=100)
        >>> one = client.statuses.list(id=7)

    """

    __slots__ = ()

    resource = "statuses"

    def list(self, *, id: int | None = None, size: int | None = None) -> list[Any]:  # noqa: A002
        """List statuses, following pagination.

        Args:
            id: Only fetch the status with this id.
            size: Stop fetching pages once this many statuses are collected.

        Returns:
            Status objects from every page fetched, in page order.

        Raises:
            ConfigurationError: If id or size is not a positive integer.

        """
        return self._list(id, size)
