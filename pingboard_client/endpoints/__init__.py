"""Endpoint modules for the Pingboard API.

Each module in this package implements a group of related read-only
endpoints.

Available endpoint groups:
    - users: User profiles
    - statuses: Status entries
    - groups: Groups

"""

from pingboard_client.endpoints.base import BaseEndpoint
from pingboard_client.endpoints.groups import GroupsEndpoint
from pingboard_client.endpoints.statuses import StatusesEndpoint
from pingboard_client.endpoints.users import UsersEndpoint

__all__ = [
    "BaseEndpoint",
    "GroupsEndpoint",
    "StatusesEndpoint",
    "UsersEndpoint",
]
