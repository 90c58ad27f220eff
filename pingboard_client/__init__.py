"""Pingboard Client Library - A Python client for the Pingboard API.

This library provides a small, typed interface for reading from Pingboard's
REST API. It includes retry with backoff, transparent pagination and an
optional response cache.

Example:
    >>> from pingboard_client import PingboardClient
    >>> client = PingboardClient(access_token="abc123")
    >>> user = client.get_user(42)

"""

from pingboard_client.client import PingboardClient
from pingboard_client.config import ClientConfig
from pingboard_client.exceptions import (
    APIError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    DecodeError,
    NetworkError,
    NotFoundError,
    PingboardError,
    RateLimitError,
    ServerError,
)
from pingboard_client.utils.cache import CacheBackend, ResponseCache
from pingboard_client.utils.http import RequestSpec
from pingboard_client.utils.retry import RetryPolicy

__version__ = "0.19.0"

__all__ = [
    "APIError",
    "AuthenticationError",
    "AuthorizationError",
    "CacheBackend",
    "ClientConfig",
    "ConfigurationError",
    "DecodeError",
    "NetworkError",
    "NotFoundError",
    "PingboardClient",
    "PingboardError",
    "RateLimitError",
    "RequestSpec",
    "ResponseCache",
    "RetryPolicy",
    "ServerError",
]
