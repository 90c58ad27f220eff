"""Test configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest
from pingboard_client import ClientConfig, PingboardClient
from pingboard_client.auth import TokenAuth
from pingboard_client.utils.http import HTTPClient

TEST_BASE_URL = "https://pingboard.test/api/v2"
TEST_TOKEN = "test_token_12345"


# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer PINGBOARD_* variables out of the tests."""
    for key in (
        "PINGBOARD_ACCESS_TOKEN",
        "PINGBOARD_API_URL",
        "PINGBOARD_TIMEOUT",
        "PINGBOARD_DEFAULT_BACKOFF",
        "PINGBOARD_MAX_TRIES",
        "PINGBOARD_USERNAME",
        "PINGBOARD_PASSWORD",
    ):
        monkeypatch.delenv(key, raising=False)


# =============================================================================
# Mock API
# =============================================================================


class MockAPI:
    """httpx transport handler that replays queued responses in order.

    Every request it receives is recorded so tests can assert on what was
    sent and how often.

    """

    def __init__(self, responses: list[httpx.Response]) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        return self.responses.pop(0)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def pages_requested(self) -> list[str | None]:
        return [request.url.params.get("page") for request in self.requests]


def page_response(field: str, items: list[Any], page: int, page_count: int) -> httpx.Response:
    """Build a Pingboard page envelope response."""
    return httpx.Response(
        200,
        json={
            field: items,
            "meta": {field: {"page": page, "page_count": page_count}},
        },
    )


@pytest.fixture
def make_page() -> Callable[..., httpx.Response]:
    """Expose page_response to tests."""
    return page_response


@pytest.fixture
def statuses_pages() -> list[httpx.Response]:
    """Three pages of statuses holding 2, 2 and 1 items."""
    return [
        page_response("statuses", [{"id": 1}, {"id": 2}], page=1, page_count=3),
        page_response("statuses", [{"id": 3}, {"id": 4}], page=2, page_count=3),
        page_response("statuses", [{"id": 5}], page=3, page_count=3),
    ]


@pytest.fixture
def sample_user_response() -> dict[str, Any]:
    """Sample Pingboard single-user envelope."""
    return {
        "users": [
            {
                "id": 42,
                "first_name": "Ada",
                "last_name": "Lovelace",
                "email": "ada@example.com",
                "job_title": "Analyst",
                "phone": "+44 20 0000 0000",
                "links": {"groups": ["7"]},
            }
        ],
        "meta": {"users": {"page": 1, "page_count": 1, "per_page": 1, "count": 1}},
    }


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
def config() -> ClientConfig:
    """Create a test configuration."""
    return ClientConfig(
        access_token=TEST_TOKEN,
        base_url=TEST_BASE_URL,
        timeout=5.0,
    )


@pytest.fixture
def make_http(
    config: ClientConfig,
) -> Callable[..., tuple[HTTPClient, MockAPI]]:
    """Factory for an HTTPClient backed by a MockAPI.

    Keyword arguments override fields of the test configuration.

    """

    def factory(*responses: httpx.Response, **overrides: Any) -> tuple[HTTPClient, MockAPI]:
        api = MockAPI(list(responses))
        cfg = config.with_overrides(**overrides) if overrides else config
        transport_client = httpx.Client(transport=httpx.MockTransport(api))
        http = HTTPClient(cfg, TokenAuth(cfg.access_token), client=transport_client)
        return http, api

    return factory


@pytest.fixture
def make_client(
    config: ClientConfig,
) -> Callable[..., tuple[PingboardClient, MockAPI]]:
    """Factory for a PingboardClient backed by a MockAPI."""

    def factory(*responses: httpx.Response, **kwargs: Any) -> tuple[PingboardClient, MockAPI]:
        api = MockAPI(list(responses))
        transport_client = httpx.Client(transport=httpx.MockTransport(api))
        client = PingboardClient(config=config, http_client=transport_client, **kwargs)
        return client, api

    return factory
