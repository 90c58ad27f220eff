"""Retry policy for transient API failures.

Retries are driven purely by the HTTP status of the response. The delay is
a fixed backoff, except for 429 responses carrying a numeric Retry-After
header, whose value wins.

Retry Conditions (default):
    - 429 Too Many Requests (respects Retry-After header)
    - 500, 502, 503, 504 Server Errors

Non-Retryable:
    - Everything else, including 401, 403, 404
    - Transport errors (no response to judge)

"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from pingboard_client.exceptions import ConfigurationError

# Status codes that warrant a retry
DEFAULT_RETRY_ON_STATUS: tuple[int, ...] = (429, 500, 502, 503, 504)

TOO_MANY_REQUESTS = 429

_RETRY_AFTER_PATTERN = re.compile(r"^[0-9]+$")


def parse_retry_after(value: str | None) -> int | None:
    """Parse a Retry-After header holding a whole number of seconds.

    HTTP-date values and anything that is not a plain non-negative integer
    are ignored.

    Args:
        value: Raw header value.

    Returns:
        Seconds to wait, or None if absent or invalid.

    Example:
        >>> parse_retry_after("3")
        3
        >>> parse_retry_after("-1") is None
        True

    """
    if value is None:
        return None
    value = value.strip()
    if not _RETRY_AFTER_PATTERN.match(value):
        return None
    return int(value)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Configuration for retry behavior.

    Attributes:
        retry_on_status: Ordered status codes that trigger a retry.
        default_backoff: Seconds to wait between attempts.
        max_tries: Maximum attempts including the first, None for unlimited.

    """

    retry_on_status: tuple[int, ...] = DEFAULT_RETRY_ON_STATUS
    default_backoff: int = 10
    max_tries: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.retry_on_status, tuple):
            object.__setattr__(self, "retry_on_status", _as_status_tuple(self.retry_on_status))
        if self.default_backoff < 0:
            raise ConfigurationError(
                f"default_backoff cannot be negative, got {self.default_backoff}"
            )
        if self.max_tries is not None and self.max_tries < 1:
            raise ConfigurationError(f"max_tries must be at least 1, got {self.max_tries}")

    def should_retry(self, status_code: int) -> bool:
        """Check whether a response status is retryable under this policy."""
        return status_code in self.retry_on_status

    def has_attempts_left(self, attempt: int) -> bool:
        """Check whether another attempt may follow attempt number ``attempt``.

        Args:
            attempt: The 1-indexed attempt that just failed.

        """
        return self.max_tries is None or attempt < self.max_tries

    def delay_for(self, status_code: int, retry_after: str | None = None) -> int:
        """Compute the delay before the next attempt.

        Args:
            status_code: Status of the failed response.
            retry_after: Raw Retry-After header of that response.

        Returns:
            Seconds to sleep.

        """
        if status_code == TOO_MANY_REQUESTS:
            hinted = parse_retry_after(retry_after)
            if hinted is not None:
                return hinted
        return self.default_backoff


def _as_status_tuple(codes: Iterable[int]) -> tuple[int, ...]:
    return tuple(int(code) for code in codes)
