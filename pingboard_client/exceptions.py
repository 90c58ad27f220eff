"""Custom exception hierarchy for the Pingboard Client.

Every failure raised by this library derives from PingboardError so that
callers can catch the whole family at once, while still being able to
single out configuration mistakes from HTTP failures.

Exception Hierarchy:
    PingboardError (base)
    ├── ConfigurationError     - Invalid config, bad request, bad params
    ├── DecodeError            - Successful response with malformed JSON
    ├── NetworkError           - Connection failures, timeouts
    └── APIError               - Terminal HTTP failure
        ├── AuthenticationError    - 401
        ├── AuthorizationError     - 403
        ├── NotFoundError          - 404
        ├── RateLimitError         - 429
        └── ServerError            - 5xx

Example:
    >>> try:
    ...     user = client.get_user(42)
    ... except NotFoundError as e:
    ...     print(f"No such user: {e.body}")
    ... except APIError as e:
    ...     print(f"HTTP {e.status_code} {e.reason}")

"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class PingboardError(Exception):
    """Base exception for all Pingboard client errors.

    Attributes:
        message: Human-readable error description.

    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        """Return a detailed representation for debugging."""
        return f"{self.__class__.__name__}(message={self.message!r})"


class ConfigurationError(PingboardError):
    """Raised when the client or a request is misconfigured.

    Covers a missing access token, a request without a path or URL, query
    fields on a non-GET request and resource parameters of the wrong type.
    These are never retried.

    Example:
        >>> RequestSpec(method="GET")
        ConfigurationError: Cannot request without either a path or url

    """


class DecodeError(PingboardError):
    """Raised when a successful response body is not valid JSON or has the wrong shape.

    Attributes:
        body: The raw response text.
        original_error: The underlying decode exception.

    """

    def __init__(
        self,
        message: str,
        body: str = "",
        original_error: Exception | None = None,
    ) -> None:
        self.body = body
        self.original_error = original_error
        super().__init__(message)


class NetworkError(PingboardError):
    """Raised when the transport fails before any response arrives.

    Attributes:
        original_error: The underlying httpx exception.

    Example:
        >>> client.get_user(1)  # No network
        NetworkError: Connection failed: [Errno -2] Name does not resolve

    """

    def __init__(
        self,
        message: str = "Network error",
        original_error: Exception | None = None,
    ) -> None:
        self.original_error = original_error
        super().__init__(message)


class APIError(PingboardError):
    """Raised when the API answers with a terminal HTTP failure.

    Terminal means either the status is not retryable or the retry budget
    ran out. The last response's details are kept on the exception.

    Attributes:
        status_code: HTTP status code.
        reason: HTTP reason phrase.
        body: Raw response body text.

    """

    def __init__(
        self,
        status_code: int,
        reason: str = "",
        body: str = "",
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"API Error: http status: {status_code} {reason} Content: {body}")


class AuthenticationError(APIError):
    """Raised on HTTP 401, typically an invalid or expired access token."""


class AuthorizationError(APIError):
    """Raised on HTTP 403, the token lacks access to the resource."""


class NotFoundError(APIError):
    """Raised on HTTP 404."""


class RateLimitError(APIError):
    """Raised when a 429 response could not be retried any further.

    Attributes:
        retry_after: Seconds the server asked us to wait, if it said so.

    """

    def __init__(
        self,
        status_code: int = 429,
        reason: str = "Too Many Requests",
        body: str = "",
        retry_after: int | None = None,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(status_code, reason, body)


class ServerError(APIError):
    """Raised on HTTP 5xx once retries are exhausted or disabled."""


# =============================================================================
# Exception Factory
# =============================================================================


def exception_from_response(
    response: httpx.Response,
    retry_after: int | None = None,
) -> APIError:
    """Create the appropriate exception from an HTTP response.

    Args:
        response: The failed httpx response.
        retry_after: Parsed Retry-After value, kept on RateLimitError.

    Returns:
        The APIError subclass matching the status code.

    """
    status_code = response.status_code
    reason = response.reason_phrase
    body = response.text

    if status_code == 429:
        return RateLimitError(
            status_code,
            reason,
            body,
            retry_after=retry_after,
        )

    if 500 <= status_code < 600:
        return ServerError(status_code, reason, body)

    exception_map: dict[int, type[APIError]] = {
        401: AuthenticationError,
        403: AuthorizationError,
        404: NotFoundError,
    }
    return exception_map.get(status_code, APIError)(status_code, reason, body)
