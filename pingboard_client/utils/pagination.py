"""Pagination utilities for Pingboard API responses.

Pingboard pages list endpoints with a ``page`` query parameter and reports
progress per field inside the response envelope::

    {
        "statuses": [{...}, {...}],
        "meta": {"statuses": {"page": 1, "page_count": 3}}
    }

Pagination Patterns:
    1. iter_pages: Lazy, one page's items at a time
    2. collect_pages: Convenience that gathers everything into a list

Both trust the server's ordering and page metadata verbatim; nothing is
deduplicated or reordered. Any failed page aborts the whole listing.

"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from pingboard_client.exceptions import DecodeError
from pingboard_client.models import PageInfo
from pingboard_client.utils.http import RequestSpec

if TYPE_CHECKING:
    from pingboard_client.utils.http import HTTPClient

logger = logging.getLogger(__name__)


def page_path(path: str, page: int) -> str:
    """Append the page query parameter to a path.

    Example:
        >>> page_path("/statuses", 2)
        '/statuses?page=2'
        >>> page_path("/statuses?include=user", 2)
        '/statuses?include=user&page=2'

    """
    separator = "&" if "?" in path else "?"
    return f"{path}{separator}page={page}"


def parse_page_info(envelope: Any, field: str) -> PageInfo | None:
    """Read ``meta.<field>`` pagination metadata from a page envelope.

    Returns:
        PageInfo, or None if the envelope carries no usable metadata.

    """
    if not isinstance(envelope, dict):
        return None
    meta = envelope.get("meta")
    if not isinstance(meta, dict) or field not in meta:
        return None
    try:
        return PageInfo.model_validate(meta[field])
    except PydanticValidationError:
        logger.warning("Ignoring malformed pagination metadata for %r: %r", field, meta[field])
        return None


def iter_pages(
    http: HTTPClient,
    path: str,
    field: str,
    *,
    method: str = "GET",
    size: int | None = None,
) -> Iterator[list[Any]]:
    """Yield the named field of successive pages.

    The first page is always fetched. Fetching stops once the server reports
    the last page for ``field``, or once ``size`` items have been yielded in
    total.

    Args:
        http: The request executor.
        path: Resource path, may already carry a query string.
        field: Envelope field holding the items.
        method: HTTP method.
        size: Optional cap on the number of items collected.

    Yields:
        The item list of each page, in page order.

    """
    page = 1
    collected = 0

    while True:
        envelope = http.request(RequestSpec(method=method, path=page_path(path, page)))

        items = envelope.get(field) if isinstance(envelope, dict) else None
        if items is None:
            items = []
        elif not isinstance(items, list):
            raise DecodeError(
                f"Expected a list in the {field!r} field of page {page}, "
                f"got {type(items).__name__}",
                body=repr(envelope),
            )
        collected += len(items)
        yield items

        info = parse_page_info(envelope, field)
        if info is None or not info.has_next:
            return
        if size and collected >= size:
            logger.debug("Collected %d %s (cap %d), not fetching more pages", collected, field, size)
            return

        page += 1


def collect_pages(
    http: HTTPClient,
    path: str,
    field: str,
    *,
    method: str = "GET",
    size: int | None = None,
) -> list[Any]:
    """Collect the named field across all pages into one list.

    The result may hold more than ``size`` items: whole pages are kept.

    Example:
        >>> statuses = collect_pages(http, "/statuses", "statuses", size=50)

    """
    results: list[Any] = []
    for items in iter_pages(http, path, field, method=method, size=size):
        results.extend(items)
    return results
