"""Users endpoint implementation.

This module provides read access to Pingboard's Users API:
- Get one user by id
- List users across all pages

API Reference: https://pingboard.docs.apiary.io/#reference/users

"""

from __future__ import annotations

from typing import Any

from pingboard_client.endpoints.base import BaseEndpoint


class UsersEndpoint(BaseEndpoint):
    """Endpoint for user-related API calls.

    Example:
        >>> client = PingboardClient(access_token="abc")
        >>> envelope = client.users.get(42)
        >>> envelope["users"][0]["first_name"]
        'Ada'
        >>> everyone = client.users.list()

    """

    __slots__ = ()

    resource = "users"

    def get(self, id: int) -> Any | None:  # noqa: A002
        """Get a single user.

        The result is cached under ``users/<id>`` when the client has a cache.

        Args:
            id: The Pingboard user id.

        Returns:
            The decoded response envelope.

        Raises:
            ConfigurationError: If id is not a positive integer.
            NotFoundError: If the user doesn't exist.

        """
        return self._get_by_id(id)

    def list(self, *, size: int | None = None) -> list[Any]:
        """List users, following pagination.

        Args:
            size: Stop fetching pages once this many users are collected.

        Returns:
            User objects from every page fetched, in page order.

        """
        return self._list(size=size)
