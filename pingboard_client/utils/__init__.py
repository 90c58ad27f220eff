"""Utility modules for the Pingboard Client.

This package contains cross-cutting concerns and helper utilities:
- http: Request executor with retry
- retry: Retry policy and Retry-After parsing
- pagination: Page-number pagination over the response envelope
- cache: Cache protocol and in-memory backend
- logger: Library logger and TRACE level

"""

from pingboard_client.utils.cache import CacheBackend, ResponseCache
from pingboard_client.utils.http import HTTPClient, RequestSpec
from pingboard_client.utils.pagination import collect_pages, iter_pages, page_path
from pingboard_client.utils.retry import RetryPolicy, parse_retry_after

__all__ = [
    "CacheBackend",
    "HTTPClient",
    "RequestSpec",
    "ResponseCache",
    "RetryPolicy",
    "collect_pages",
    "iter_pages",
    "page_path",
    "parse_retry_after",
]
