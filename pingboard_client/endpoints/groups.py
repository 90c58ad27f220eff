"""Groups endpoint implementation.

API Reference: https://pingboard.docs.apiary.io/#reference/groups

"""

from __future__ import annotations

from typing import Any

from pingboard_client.endpoints.base import BaseEndpoint


class GroupsEndpoint(BaseEndpoint):
    """Endpoint for group-related API calls."""

    __slots__ = ()

    resource = "groups"

    def get(self, id: int) -> Any | None:  # noqa: A002
        """Get a single group, cached under ``groups/<id>``."""
        return self._get_by_id(id)

    def list(self, *, size: int | None = None) -> list[Any]:
        """List groups, following pagination."""
        return self._list(size=size)
