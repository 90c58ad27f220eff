"""Unit tests for the HTTP request executor."""

from __future__ import annotations

import logging
from unittest.mock import patch

import httpx
import pytest
from pingboard_client.auth import TokenAuth
from pingboard_client.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServerError,
)
from pingboard_client.utils.http import HTTPClient, RequestSpec
from pingboard_client.utils.logger import TRACE

TEST_BASE_URL = "https://pingboard.test/api/v2"
TEST_TOKEN = "test_token_12345"


class TestRequestSpec:
    """Tests for RequestSpec validation."""

    def test_requires_path_or_url(self):
        """A request without a target is rejected at construction."""
        with pytest.raises(ConfigurationError, match="either a path or url"):
            RequestSpec(method="GET")

    def test_rejects_path_and_url_together(self):
        """Path and url are mutually exclusive."""
        with pytest.raises(ConfigurationError):
            RequestSpec(path="/users", url="https://example.com/users")

    def test_fields_only_for_get(self):
        """Query fields on a non-GET request are rejected."""
        with pytest.raises(ConfigurationError, match="GET"):
            RequestSpec(method="POST", path="/users", fields={"q": "x"})

    def test_method_is_upper_cased(self):
        """Lower-case GET still allows fields."""
        spec = RequestSpec(method="get", path="/users", fields={"q": "x"})
        assert spec.method == "GET"

    def test_is_immutable(self):
        """Specs cannot be modified after construction."""
        spec = RequestSpec(path="/users")
        with pytest.raises(AttributeError):
            spec.path = "/groups"  # type: ignore[misc]

    def test_invalid_spec_never_reaches_network(self, make_http):
        """Configuration errors happen before any request is sent."""
        http, api = make_http()
        with pytest.raises(ConfigurationError):
            http.request(RequestSpec(method="DELETE", path="/users/1", fields={"a": 1}))
        assert api.call_count == 0


class TestRequestBuilding:
    """Tests for URL and header construction."""

    def test_path_is_joined_to_base_url(self, make_http):
        http, api = make_http(httpx.Response(200, json={}))
        http.request(RequestSpec(path="/users/42"))
        assert str(api.requests[0].url) == f"{TEST_BASE_URL}/users/42"

    def test_path_without_leading_slash(self, make_http):
        http, _ = make_http()
        assert http.build_url(RequestSpec(path="users/42")) == f"{TEST_BASE_URL}/users/42"

    def test_absolute_url_used_verbatim(self, make_http):
        http, api = make_http(httpx.Response(200, json={}))
        http.request(RequestSpec(url="https://elsewhere.test/thing?x=1"))
        assert str(api.requests[0].url) == "https://elsewhere.test/thing?x=1"

    def test_default_headers_applied(self, make_http):
        """JSON content negotiation and bearer auth are sent by default."""
        http, api = make_http(httpx.Response(200, json={}))
        http.request(RequestSpec(path="/users"))

        headers = api.requests[0].headers
        assert headers["Authorization"] == f"Bearer {TEST_TOKEN}"
        assert headers["Content-Type"] == "application/json"
        assert headers["Accept"] == "application/json"

    def test_explicit_headers_replace_defaults(self, make_http):
        """Caller headers replace the default set, auth included."""
        http, api = make_http(httpx.Response(200, json={}))
        http.request(RequestSpec(path="/users", headers={"X-Trace": "1"}))

        headers = api.requests[0].headers
        assert headers["X-Trace"] == "1"
        assert "Authorization" not in headers

    def test_fields_become_query_parameters(self, make_http):
        http, api = make_http(httpx.Response(200, json={}))
        http.request(RequestSpec(path="/users?page=2", fields={"include": "groups"}))

        params = api.requests[0].url.params
        assert params["include"] == "groups"
        assert params["page"] == "2"

    def test_body_is_sent(self, make_http):
        http, api = make_http(httpx.Response(200, json={}))
        http.request(RequestSpec(method="POST", path="/search", body='{"q": "ada"}'))

        assert api.requests[0].method == "POST"
        assert api.requests[0].content == b'{"q": "ada"}'


class TestDecoding:
    """Tests for response body decoding."""

    def test_returns_decoded_json(self, make_http):
        http, _ = make_http(httpx.Response(200, json={"users": [{"id": 1}]}))
        assert http.request(RequestSpec(path="/users")) == {"users": [{"id": 1}]}

    def test_empty_body_returns_none(self, make_http):
        """An empty successful body is not an error."""
        http, _ = make_http(httpx.Response(200, content=b""))
        assert http.request(RequestSpec(path="/users")) is None

    def test_no_content_returns_none(self, make_http):
        http, _ = make_http(httpx.Response(204))
        assert http.request(RequestSpec(path="/users")) is None

    def test_utf8_body(self, make_http):
        http, _ = make_http(
            httpx.Response(
                200,
                content='{"first_name": "Zoë"}'.encode(),
                headers={"Content-Type": "application/json; charset=utf-8"},
            )
        )
        assert http.request(RequestSpec(path="/users/1")) == {"first_name": "Zoë"}

    @patch("pingboard_client.utils.http.time.sleep")
    def test_malformed_json_raises_decode_error(self, mock_sleep, make_http):
        """Malformed JSON is a distinct failure and is not retried."""
        http, api = make_http(httpx.Response(200, content=b"{not json"))

        with pytest.raises(DecodeError) as exc_info:
            http.request(RequestSpec(path="/users"))

        assert exc_info.value.body == "{not json"
        assert not isinstance(exc_info.value, APIError)
        assert api.call_count == 1
        mock_sleep.assert_not_called()


class TestRetry:
    """Tests for the retry loop."""

    @patch("pingboard_client.utils.http.time.sleep")
    def test_rate_limit_honours_retry_after(self, mock_sleep, make_http):
        """A 429 with Retry-After waits that long instead of the default."""
        http, api = make_http(
            httpx.Response(429, headers={"Retry-After": "3"}),
            httpx.Response(200, json={"ok": True}),
        )

        result = http.request(RequestSpec(path="/users"))

        assert result == {"ok": True}
        assert api.call_count == 2
        mock_sleep.assert_called_once_with(3)

    @patch("pingboard_client.utils.http.time.sleep")
    def test_rate_limit_without_header_uses_default(self, mock_sleep, make_http):
        http, _ = make_http(
            httpx.Response(429),
            httpx.Response(200, json={}),
        )
        http.request(RequestSpec(path="/users"))
        mock_sleep.assert_called_once_with(10)

    @pytest.mark.parametrize("header", ["soon", "-1", "1.5", "Wed, 21 Oct 2015 07:28:00 GMT"])
    @patch("pingboard_client.utils.http.time.sleep")
    def test_invalid_retry_after_uses_default(self, mock_sleep, header, make_http):
        http, _ = make_http(
            httpx.Response(429, headers={"Retry-After": header}),
            httpx.Response(200, json={}),
        )
        http.request(RequestSpec(path="/users"))
        mock_sleep.assert_called_once_with(10)

    @patch("pingboard_client.utils.http.time.sleep")
    def test_retry_after_ignored_for_server_errors(self, mock_sleep, make_http):
        """Only 429 responses may override the backoff."""
        http, _ = make_http(
            httpx.Response(503, headers={"Retry-After": "3"}),
            httpx.Response(200, json={}),
        )
        http.request(RequestSpec(path="/users"))
        mock_sleep.assert_called_once_with(10)

    @patch("pingboard_client.utils.http.time.sleep")
    def test_custom_default_backoff(self, mock_sleep, make_http):
        http, _ = make_http(
            httpx.Response(502),
            httpx.Response(200, json={}),
            default_backoff=2,
        )
        http.request(RequestSpec(path="/users"))
        mock_sleep.assert_called_once_with(2)

    @patch("pingboard_client.utils.http.time.sleep")
    def test_max_tries_exhausted(self, mock_sleep, make_http):
        """With max_tries=2 the second failure is final."""
        http, api = make_http(
            httpx.Response(500, text="first"),
            httpx.Response(500, text="second"),
            httpx.Response(500, text="third"),
            max_tries=2,
        )

        with pytest.raises(ServerError) as exc_info:
            http.request(RequestSpec(path="/users"))

        assert api.call_count == 2
        assert exc_info.value.status_code == 500
        assert exc_info.value.reason == "Internal Server Error"
        assert exc_info.value.body == "second"
        assert mock_sleep.call_count == 1

    @patch("pingboard_client.utils.http.time.sleep")
    def test_max_tries_one_never_retries(self, mock_sleep, make_http):
        http, api = make_http(
            httpx.Response(429, headers={"Retry-After": "3"}, text="slow down"),
            max_tries=1,
        )

        with pytest.raises(RateLimitError) as exc_info:
            http.request(RequestSpec(path="/users"))

        assert exc_info.value.retry_after == 3
        assert exc_info.value.body == "slow down"
        assert api.call_count == 1
        mock_sleep.assert_not_called()

    @patch("pingboard_client.utils.http.time.sleep")
    def test_unbounded_retries_until_success(self, mock_sleep, make_http):
        """Without max_tries the executor keeps going."""
        http, api = make_http(
            httpx.Response(500),
            httpx.Response(502),
            httpx.Response(503),
            httpx.Response(504),
            httpx.Response(200, json={"done": True}),
        )

        assert http.request(RequestSpec(path="/users")) == {"done": True}
        assert api.call_count == 5
        assert mock_sleep.call_count == 4

    @patch("pingboard_client.utils.http.time.sleep")
    def test_not_found_fails_immediately(self, mock_sleep, make_http):
        """404 is not retryable: one attempt, no sleep."""
        http, api = make_http(httpx.Response(404, text='{"error": "missing"}'))

        with pytest.raises(NotFoundError) as exc_info:
            http.request(RequestSpec(path="/users/999"))

        assert exc_info.value.status_code == 404
        assert exc_info.value.body == '{"error": "missing"}'
        assert api.call_count == 1
        mock_sleep.assert_not_called()

    @patch("pingboard_client.utils.http.time.sleep")
    def test_unauthorized_fails_immediately(self, mock_sleep, make_http):
        http, _ = make_http(httpx.Response(401))
        with pytest.raises(AuthenticationError):
            http.request(RequestSpec(path="/users"))
        mock_sleep.assert_not_called()

    @patch("pingboard_client.utils.http.time.sleep")
    def test_custom_retry_set(self, mock_sleep, make_http):
        """Statuses outside a custom retry set are terminal."""
        http, api = make_http(
            httpx.Response(500),
            retry_on_status=(409,),
        )
        with pytest.raises(ServerError):
            http.request(RequestSpec(path="/users"))
        assert api.call_count == 1
        mock_sleep.assert_not_called()

    @patch("pingboard_client.utils.http.time.sleep")
    def test_identical_request_is_resent(self, mock_sleep, make_http):
        http, api = make_http(
            httpx.Response(503),
            httpx.Response(200, json={}),
        )
        http.request(RequestSpec(method="POST", path="/search", body="{}"))

        first, second = api.requests
        assert first.method == second.method == "POST"
        assert first.url == second.url
        assert first.content == second.content == b"{}"

    @patch("pingboard_client.utils.http.time.sleep")
    def test_retry_is_logged(self, mock_sleep, make_http, caplog):
        http, _ = make_http(
            httpx.Response(429, headers={"Retry-After": "1"}),
            httpx.Response(200, json={}),
        )
        with caplog.at_level(logging.WARNING, logger="pingboard_client"):
            http.request(RequestSpec(path="/users"))

        assert "Too Many Requests" in caplog.text
        assert "retry in 1 seconds" in caplog.text


class TestNetworkErrors:
    """Tests for transport failures."""

    @staticmethod
    def _flaky_http(config, failures, **overrides):
        """HTTPClient whose transport refuses the first ``failures`` connections."""
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            if len(attempts) <= failures:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={"users": []})

        cfg = config.with_overrides(**overrides) if overrides else config
        http = HTTPClient(
            cfg,
            TokenAuth(cfg.access_token),
            client=httpx.Client(transport=httpx.MockTransport(handler)),
        )
        return http, attempts

    @patch("pingboard_client.utils.http.time.sleep")
    def test_connect_error_is_retried(self, mock_sleep, config):
        http, attempts = self._flaky_http(config, failures=1, default_backoff=4)

        assert http.request(RequestSpec(path="/users")) == {"users": []}
        assert len(attempts) == 2
        mock_sleep.assert_called_once_with(4)

    @patch("pingboard_client.utils.http.time.sleep")
    def test_network_error_after_max_tries(self, mock_sleep, config):
        http, attempts = self._flaky_http(config, failures=10, max_tries=2)

        with pytest.raises(NetworkError) as exc_info:
            http.request(RequestSpec(path="/users"))

        assert isinstance(exc_info.value.original_error, httpx.ConnectError)
        assert len(attempts) == 2
        assert mock_sleep.call_count == 1

    @patch("pingboard_client.utils.http.time.sleep")
    def test_timeout_is_retried(self, mock_sleep, config):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200, json={"ok": True})

        http = HTTPClient(
            config,
            TokenAuth(config.access_token),
            client=httpx.Client(transport=httpx.MockTransport(handler)),
        )

        assert http.request(RequestSpec(path="/users")) == {"ok": True}
        assert len(calls) == 2


class TestLifecycle:
    """Tests for lazy construction and cleanup."""

    def test_transport_is_built_lazily_and_reused(self, config):
        http = HTTPClient(config, TokenAuth(config.access_token))
        try:
            assert http._client is None
            first = http.client
            assert http.client is first
        finally:
            http.close()

    def test_init_builds_collaborators(self, config):
        http = HTTPClient(config, TokenAuth(config.access_token))
        try:
            http.init()
            assert http._client is not None
            assert http._default_headers is not None
        finally:
            http.close()

    def test_default_headers_copy_is_returned(self, make_http):
        http, _ = make_http()
        http.default_headers["Authorization"] = "tampered"
        assert http.default_headers["Authorization"] == f"Bearer {TEST_TOKEN}"

    def test_injected_client_is_not_closed(self, config):
        injected = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        http = HTTPClient(config, TokenAuth(config.access_token), client=injected)
        http.close()
        assert injected.is_closed is False
        injected.close()


class TestTraceLogging:
    """Tests for request/response dumps at TRACE level."""

    def test_trace_dumps_redact_token(self, make_http, caplog):
        http, _ = make_http(httpx.Response(200, json={"users": []}))
        with caplog.at_level(TRACE, logger="pingboard_client"):
            http.request(RequestSpec(path="/users"))

        assert "Request:" in caplog.text
        assert "Last response:" in caplog.text
        assert TEST_TOKEN not in caplog.text
