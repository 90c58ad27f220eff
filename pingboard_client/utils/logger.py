"""Logging configuration for the Pingboard Client.

This module provides a pre-configured logger for the library.
Users can customize logging by configuring the 'pingboard_client' logger.

Besides the standard levels the library logs full request and response
dumps at TRACE (5), below DEBUG, so they stay silent unless asked for.

Example:
    >>> import logging
    >>> logging.getLogger("pingboard_client").setLevel(logging.DEBUG)
    >>>
    >>> from pingboard_client.utils.logger import TRACE, configure_logging
    >>> configure_logging(level=TRACE)  # include request/response dumps

"""

from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING, Any, TextIO

if TYPE_CHECKING:
    import httpx

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Create library logger
logger = logging.getLogger("pingboard_client")

# Set default level to WARNING to avoid noise
logger.setLevel(logging.WARNING)

# Add a null handler to prevent "No handler found" warnings
logger.addHandler(logging.NullHandler())

_REDACTED_HEADERS = frozenset({"authorization"})


def configure_logging(
    level: int = logging.INFO,
    format_string: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure logging for the Pingboard Client library.

    This is a convenience function for quickly setting up logging.
    Applications should normally configure logging themselves.

    Args:
        level: Logging level (e.g., logging.DEBUG, TRACE).
        format_string: Custom format string for log messages.
        stream: Output stream (defaults to sys.stderr).

    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    if stream is None:
        stream = sys.stderr

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(format_string))

    logger.addHandler(handler)
    logger.setLevel(level)


def dump_request(request: httpx.Request) -> str:
    """Render a request as indented JSON for trace logging."""
    return _dump(
        {
            "method": request.method,
            "url": str(request.url),
            "headers": _safe_headers(request.headers),
            "body": request.content.decode("utf-8", errors="replace"),
        }
    )


def dump_response(response: httpx.Response) -> str:
    """Render a response as indented JSON for trace logging."""
    return _dump(
        {
            "status": response.status_code,
            "reason": response.reason_phrase,
            "headers": dict(response.headers),
            "body": response.text,
        }
    )


def _safe_headers(headers: httpx.Headers) -> dict[str, str]:
    return {
        name: ("***" if name.lower() in _REDACTED_HEADERS else value)
        for name, value in headers.items()
    }


def _dump(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, default=str)
