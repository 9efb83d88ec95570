"""
Tests for the caching, retrying HTTP client.
"""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import pytest_asyncio

from tierlist.core.cache import MemoryCacheStore
from tierlist.core.errors import (
    MissingCredentialsError,
    UpstreamError,
    UpstreamHTTPError,
    UpstreamRetryExhaustedError,
)
from tierlist.core.http import (
    CachedHttpClient,
    build_cache_key,
    compute_backoff_ms,
    is_retryable_status,
    require_credentials,
)

URL = "https://upstream.test/api/rankings"


class RecordingTransport(httpx.MockTransport):
    """Mock transport replaying a list of responses (or exceptions) in order."""

    def __init__(self, responses):
        self.calls = []
        self._responses = list(responses)
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        outcome = self._responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def cache():
    return MemoryCacheStore()


@pytest_asyncio.fixture
async def no_sleep():
    with patch("tierlist.core.http.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


async def _fetch(transport, cache, **kwargs):
    async with CachedHttpClient(cache, transport=transport) as client:
        return await client.fetch_with_cache(URL, cache_namespace="test", **kwargs)


class TestHelpers:
    """Test cases for the request helpers."""

    def test_cache_key_is_namespaced_and_stable(self):
        """Same request gives the same key; namespace and body change it."""
        key = build_cache_key("wcl", "POST", URL, "{}")
        assert key.startswith("cache:wcl:")
        assert key == build_cache_key("wcl", "POST", URL, "{}")
        assert key != build_cache_key("raiderio", "POST", URL, "{}")
        assert key != build_cache_key("wcl", "POST", URL, '{"page": 2}')

    def test_backoff_grows_exponentially_with_bounded_jitter(self):
        """Backoff is base * 2^attempt plus less than 250ms of jitter."""
        for attempt in range(4):
            backoff = compute_backoff_ms(500, attempt)
            assert 500 * 2**attempt <= backoff < 500 * 2**attempt + 250

    @pytest.mark.parametrize(
        "status,expected",
        [(429, True), (500, True), (503, True), (400, False), (404, False), (200, False)],
    )
    def test_retryable_statuses(self, status, expected):
        assert is_retryable_status(status) is expected

    def test_require_credentials(self):
        """Missing credentials fail unless mock mode is on."""
        with pytest.raises(MissingCredentialsError):
            require_credentials("id", None)
        with pytest.raises(MissingCredentialsError):
            require_credentials("id", "  ")
        require_credentials(None, None, mock_mode=True)
        require_credentials("id", "secret")


class TestFetchWithCache:
    """Test cases for CachedHttpClient.fetch_with_cache."""

    @pytest.mark.asyncio
    async def test_success_is_cached(self, cache, no_sleep):
        """A successful response is stored and the second call skips the network."""
        transport = RecordingTransport([httpx.Response(200, json={"rankings": [1, 2]})])

        first = await _fetch(transport, cache)
        second = await _fetch(transport, cache)

        assert first == {"rankings": [1, 2]}
        assert second == first
        assert len(transport.calls) == 1
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_cache_hit_avoids_network(self, cache, no_sleep):
        """A pre-populated cache entry is returned without any request."""
        key = build_cache_key("test", "GET", URL, None)
        await cache.set(key, json.dumps({"cached": True}), 60)
        transport = RecordingTransport([])

        assert await _fetch(transport, cache) == {"cached": True}
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_retries_on_rate_limit_and_server_errors(self, cache, no_sleep):
        """429 and 5xx responses are retried with backoff until success."""
        transport = RecordingTransport(
            [
                httpx.Response(429),
                httpx.Response(503),
                httpx.Response(200, json={"ok": True}),
            ]
        )

        result = await _fetch(transport, cache, retry_count=4, retry_base_delay_ms=10)

        assert result == {"ok": True}
        assert len(transport.calls) == 3
        assert no_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_non_retryable_status_fails_immediately(self, cache, no_sleep):
        """A 4xx other than 429 raises without retrying."""
        transport = RecordingTransport([httpx.Response(404)])

        with pytest.raises(UpstreamHTTPError) as exc_info:
            await _fetch(transport, cache)

        assert exc_info.value.status_code == 404
        assert "404" in str(exc_info.value)
        assert len(transport.calls) == 1
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retryable_status_on_last_attempt_fails(self, cache, no_sleep):
        """A 5xx that outlasts every retry is reported like exhausted network retries."""
        transport = RecordingTransport([httpx.Response(500), httpx.Response(503)])

        with pytest.raises(UpstreamRetryExhaustedError) as exc_info:
            await _fetch(transport, cache, retry_count=1)

        assert exc_info.value.status_code == 503
        assert f"Failed request for {URL}: 503 Service Unavailable" in str(exc_info.value)
        assert len(transport.calls) == 2
        assert no_sleep.await_count == 1
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_rate_limit_on_every_attempt_exhausts_retries(self, cache, no_sleep):
        transport = RecordingTransport([httpx.Response(429) for _ in range(3)])

        with pytest.raises(UpstreamRetryExhaustedError) as exc_info:
            await _fetch(transport, cache, retry_count=2)

        assert exc_info.value.status_code == 429
        assert "429 Too Many Requests" in str(exc_info.value)
        assert len(transport.calls) == 3

    @pytest.mark.asyncio
    async def test_network_failures_exhaust_retries(self, cache, no_sleep):
        """Repeated transport errors end with the last error in the message."""
        transport = RecordingTransport(
            [
                httpx.ConnectError("connection refused"),
                httpx.ConnectError("connection refused"),
                httpx.ConnectError("connection reset"),
            ]
        )

        with pytest.raises(UpstreamRetryExhaustedError) as exc_info:
            await _fetch(transport, cache, retry_count=2)

        assert "connection reset" in str(exc_info.value)
        assert URL in str(exc_info.value)
        assert len(transport.calls) == 3
        assert no_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_network_failure_then_success(self, cache, no_sleep):
        transport = RecordingTransport(
            [httpx.ReadTimeout("timed out"), httpx.Response(200, json=[1])]
        )

        assert await _fetch(transport, cache) == [1]

    @pytest.mark.asyncio
    async def test_invalid_json_raises_upstream_error(self, cache, no_sleep):
        """A 200 with a non-JSON body is an upstream error and is not cached."""
        transport = RecordingTransport([httpx.Response(200, text="<html>oops</html>")])

        with pytest.raises(UpstreamError):
            await _fetch(transport, cache)

        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_post_body_and_headers_are_sent(self, cache, no_sleep):
        transport = RecordingTransport([httpx.Response(200, json={"data": {}})])

        await _fetch(
            transport,
            cache,
            method="POST",
            headers={"Authorization": "Bearer token"},
            body='{"query": "{}"}',
        )

        request = transport.calls[0]
        assert request.method == "POST"
        assert request.headers["Authorization"] == "Bearer token"
        assert request.content == b'{"query": "{}"}'
