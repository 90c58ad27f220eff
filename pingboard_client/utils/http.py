"""HTTP request executor for the Pingboard API.

This module provides a thin wrapper around httpx that handles:
- Request validation (RequestSpec)
- Default JSON and bearer-token headers
- Retry with a fixed backoff, honouring Retry-After on 429
- Response decoding and error mapping

The httpx client and the default headers are built lazily on first use and
reused for every later request made through the same HTTPClient.

The HTTPClient is an internal implementation detail. Use PingboardClient
instead.

"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from pingboard_client.exceptions import (
    ConfigurationError,
    DecodeError,
    NetworkError,
    exception_from_response,
)
from pingboard_client.utils.logger import TRACE, dump_request, dump_response
from pingboard_client.utils.retry import parse_retry_after

if TYPE_CHECKING:
    from pingboard_client.auth import TokenAuth
    from pingboard_client.config import ClientConfig
    from pingboard_client.utils.cache import CacheBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RequestSpec:
    """Immutable description of one API request.

    Exactly one of ``path`` (relative to the API base URL) or ``url``
    (absolute) must be given. ``fields`` are query parameters and are only
    allowed on GET requests. ``headers``, when given, replace the client's
    default headers entirely.

    Raises:
        ConfigurationError: On construction, if the combination is invalid.

    Example:
        >>> RequestSpec(path="/users/42")
        >>> RequestSpec(path="/statuses", fields={"include": "user"})
        >>> RequestSpec(method="POST", url="https://example.com/hook", body="{}")

    """

    method: str = "GET"
    path: str | None = None
    url: str | None = None
    body: str | None = None
    headers: Mapping[str, str] | None = None
    fields: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())

        if not self.path and not self.url:
            raise ConfigurationError("Cannot request without either a path or url")
        if self.path and self.url:
            raise ConfigurationError("Request takes a path or a url, not both")

        if self.fields is not None and self.method != "GET":
            raise ConfigurationError("Cannot use fields unless the request method is GET")


class HTTPClient:
    """Low-level HTTP client for Pingboard API requests.

    Note:
        This is an internal class. Use PingboardClient for the public API.

    """

    __slots__ = (
        "_auth",
        "_cache",
        "_client",
        "_config",
        "_default_headers",
        "_owns_client",
        "_policy",
    )

    def __init__(
        self,
        config: ClientConfig,
        auth: TokenAuth,
        *,
        client: httpx.Client | None = None,
        cache: CacheBackend | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            config: Client configuration.
            auth: Bearer token authentication.
            client: Pre-built httpx client to reuse. It is not closed by us.
            cache: Optional cache backend shared with the endpoints.

        """
        self._config = config
        self._auth = auth
        self._policy = config.retry_policy
        self._client = client
        self._owns_client = client is None
        self._cache = cache
        self._default_headers: dict[str, str] | None = None

    @property
    def cache(self) -> CacheBackend | None:
        """Get the cache backend, if one was configured."""
        return self._cache

    @property
    def client(self) -> httpx.Client:
        """The httpx client, created on first access."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    @property
    def default_headers(self) -> dict[str, str]:
        """Headers sent when a request does not bring its own."""
        if self._default_headers is None:
            self._default_headers = self._build_default_headers()
        return dict(self._default_headers)

    def init(self) -> None:
        """Build the lazily-created collaborators now.

        Errors while building them surface here instead of on the first
        request.

        """
        _ = self.client
        _ = self.default_headers

    def _create_client(self) -> httpx.Client:
        logger.debug("Building HTTP client")
        return httpx.Client(
            timeout=httpx.Timeout(self._config.timeout),
            headers={"User-Agent": self._config.user_agent},
        )

    def _build_default_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        headers.update(self._auth.headers())
        return headers

    def build_url(self, spec: RequestSpec) -> str:
        """Resolve the absolute URL for a request."""
        if spec.url:
            return spec.url
        return f"{self._config.base_url}/{(spec.path or '').lstrip('/')}"

    def request(self, spec: RequestSpec) -> Any | None:
        """Send a request, retrying per the retry policy.

        Args:
            spec: The request to send.

        Returns:
            Decoded JSON body, or None when the body is empty.

        Raises:
            APIError: For a non-retryable status or once retries run out.
            DecodeError: If a successful body is not valid JSON.
            NetworkError: For connection failures once retries run out.

        """
        url = httpx.URL(self.build_url(spec))
        if spec.fields is not None:
            # keeps any query string already on the path
            url = url.copy_merge_params(dict(spec.fields))

        request = self.client.build_request(
            spec.method,
            url,
            headers=dict(spec.headers) if spec.headers is not None else self.default_headers,
            content=spec.body,
        )

        logger.debug("Requesting: %s %s", request.method, request.url)
        if logger.isEnabledFor(TRACE):
            logger.log(TRACE, "Request:\n%s", dump_request(request))

        response = self._send_with_retry(request)

        if logger.isEnabledFor(TRACE):
            logger.log(TRACE, "Last response:\n%s", dump_response(response))

        if not response.is_success:
            raise exception_from_response(
                response,
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
            )

        return self._decode(response)

    def _send_with_retry(self, request: httpx.Request) -> httpx.Response:
        """Send until success, a non-retryable status, or max_tries.

        Network failures are retried like a retryable status, with the
        default backoff.

        Returns:
            The last response received, successful or not.

        Raises:
            NetworkError: If the last attempt failed at the transport level.

        """
        attempt = 0

        while True:
            attempt += 1
            try:
                response = self._send(request)
            except NetworkError as e:
                delay = self._policy.default_backoff
                logger.warning(
                    "Request failed: %s ... going to backoff and retry in %d seconds!",
                    e.message,
                    delay,
                )
                if not self._policy.has_attempts_left(attempt):
                    logger.debug(
                        "Try %d failed... exceeded max_tries (%d) so not going to retry",
                        attempt,
                        self._policy.max_tries,
                    )
                    raise
                logger.debug("Try %d failed... sleeping %d before next attempt", attempt, delay)
                time.sleep(delay)
                continue

            if response.is_success:
                return response

            if not self._policy.should_retry(response.status_code):
                return response

            delay = self._policy.delay_for(
                response.status_code, response.headers.get("Retry-After")
            )
            if response.status_code == 429:
                logger.warning(
                    "Received a %d (Too Many Requests) response... "
                    "going to backoff and retry in %d seconds!",
                    response.status_code,
                    delay,
                )
            else:
                logger.warning(
                    "Received a %d: %s ... going to backoff and retry in %d seconds!",
                    response.status_code,
                    response.text,
                    delay,
                )

            if not self._policy.has_attempts_left(attempt):
                logger.debug(
                    "Try %d failed... exceeded max_tries (%d) so not going to retry",
                    attempt,
                    self._policy.max_tries,
                )
                return response

            logger.debug("Try %d failed... sleeping %d before next attempt", attempt, delay)
            time.sleep(delay)

    def _send(self, request: httpx.Request) -> httpx.Response:
        try:
            return self.client.send(request)
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request timed out: {e}", original_error=e) from e
        except httpx.ConnectError as e:
            raise NetworkError(f"Connection failed: {e}", original_error=e) from e
        except httpx.TransportError as e:
            raise NetworkError(f"HTTP error: {e}", original_error=e) from e

    @staticmethod
    def _decode(response: httpx.Response) -> Any | None:
        """Decode a successful response body.

        The text is re-encoded as UTF-8 before parsing so that a body the
        transport decoded with the wrong charset still parses.

        """
        text = response.text
        if not text:
            return None
        try:
            return json.loads(text.encode("utf-8"))
        except ValueError as e:
            raise DecodeError(
                f"Could not decode JSON response from {response.request.url}: {e}",
                body=text,
                original_error=e,
            ) from e

    def get(self, path: str, fields: Mapping[str, Any] | None = None) -> Any | None:
        """Make a GET request against a path."""
        return self.request(RequestSpec(method="GET", path=path, fields=fields))

    def close(self) -> None:
        """Close the httpx client if this instance created it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> HTTPClient:
        """Enter context manager."""
        return self

    def __exit__(self, *args: object) -> None:
        """Exit context manager and close client."""
        self.close()
