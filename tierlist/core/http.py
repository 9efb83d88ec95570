"""HTTP client for upstream ranking services with response caching and retry/backoff."""

import asyncio
import hashlib
import json
import random
from typing import Any, Dict, Optional

import httpx
import structlog

from .cache import CacheStore
from .errors import (
    MissingCredentialsError,
    UpstreamError,
    UpstreamHTTPError,
    UpstreamRetryExhaustedError,
)

logger = structlog.get_logger(__name__)

MAX_JITTER_MS = 250


def build_cache_key(namespace: str, method: str, url: str, body: Optional[str]) -> str:
    """Build a namespaced cache key from a content hash of the request."""
    identity = f"{method}:{url}:{body or ''}"
    digest = hashlib.sha256(identity.encode("utf-8")).hexdigest()
    return f"cache:{namespace}:{digest}"


def compute_backoff_ms(retry_base_delay_ms: int, attempt: int) -> int:
    """Exponential backoff with random jitter, in milliseconds."""
    return retry_base_delay_ms * 2**attempt + random.randrange(MAX_JITTER_MS)


def is_retryable_status(status: int) -> bool:
    """Rate limits and server errors are worth another attempt."""
    return status == 429 or status >= 500


def require_credentials(*values: Optional[str], mock_mode: bool = False) -> None:
    """Fail fast when provider credentials are missing outside mock mode.

    :raises MissingCredentialsError: If any value is missing or blank
    """
    if mock_mode:
        return
    if any(value is None or value.strip() == "" for value in values):
        raise MissingCredentialsError("Required provider credentials are missing")


class CachedHttpClient:
    """Async HTTP client that caches JSON responses and retries transient failures."""

    def __init__(
        self,
        cache: CacheStore,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            cache: Cache store used for response bodies
            transport: Optional httpx transport (used by tests)
        """
        self.cache = cache
        self.transport = transport
        self.session: Optional[httpx.AsyncClient] = None
        self._session_lock = asyncio.Lock()

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def start_session(self) -> None:
        """Start the httpx session."""
        if self.session is None or self.session.is_closed:
            async with self._session_lock:
                if self.session is None or self.session.is_closed:
                    timeout = httpx.Timeout(
                        connect=5.0, read=30.0, write=10.0, pool=30.0
                    )
                    limits = httpx.Limits(
                        max_keepalive_connections=20, max_connections=20
                    )
                    self.session = httpx.AsyncClient(
                        headers={"User-Agent": "SpecTierList/1.0"},
                        timeout=timeout,
                        limits=limits,
                        transport=self.transport,
                    )

    async def close(self) -> None:
        """Close the httpx session."""
        if self.session and not self.session.is_closed:
            await self.session.aclose()

    async def fetch_with_cache(
        self,
        url: str,
        *,
        cache_namespace: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
        cache_ttl_seconds: int = 900,
        retry_count: int = 4,
        retry_base_delay_ms: int = 500,
    ) -> Any:
        """
        Fetch a JSON payload, serving it from cache when possible.

        Args:
            url: Request URL
            cache_namespace: Purpose string used to namespace the cache key
            method: HTTP method
            headers: Request headers
            body: Raw request body
            cache_ttl_seconds: Expiry of the cached response body
            retry_count: Retries after the first attempt
            retry_base_delay_ms: Base delay of the exponential backoff

        Returns:
            Parsed JSON payload

        Raises:
            UpstreamHTTPError: Non-retryable status
            UpstreamRetryExhaustedError: 429, 5xx or network failure on every attempt
        """
        cache_key = build_cache_key(cache_namespace, method, url, body)
        cached = await self.cache.get(cache_key)
        if cached:
            return json.loads(cached)

        await self.start_session()
        if self.session is None:
            raise UpstreamError("Session not initialized", url=url)

        last_error: Optional[str] = None
        last_status: Optional[int] = None

        for attempt in range(retry_count + 1):
            try:
                response = await self.session.request(
                    method, url, headers=headers, content=body
                )
            except (httpx.RequestError, asyncio.TimeoutError) as e:
                last_error = str(e)
                last_status = None
                if attempt < retry_count:
                    backoff = compute_backoff_ms(retry_base_delay_ms, attempt)
                    logger.warning(
                        "Retrying after network failure",
                        url=url,
                        attempt=attempt,
                        backoff=backoff,
                        error=last_error,
                    )
                    await asyncio.sleep(backoff / 1000)
                continue

            status = response.status_code
            if is_retryable_status(status):
                last_error = f"{status} {response.reason_phrase}"
                last_status = status
                if attempt < retry_count:
                    backoff = compute_backoff_ms(retry_base_delay_ms, attempt)
                    logger.warning(
                        "Retrying upstream request after backoff",
                        url=url,
                        status=status,
                        attempt=attempt,
                        backoff=backoff,
                    )
                    await asyncio.sleep(backoff / 1000)
                continue

            if not response.is_success:
                raise UpstreamHTTPError(
                    f"Upstream request failed: {status} {response.reason_phrase}",
                    status_code=status,
                    url=url,
                )

            text = response.text
            try:
                payload = json.loads(text)
            except ValueError as e:
                raise UpstreamError(
                    f"Invalid JSON payload from {url}: {e}", status_code=status, url=url
                ) from e

            await self.cache.set(cache_key, text, cache_ttl_seconds)
            return payload

        raise UpstreamRetryExhaustedError(
            f"Failed request for {url}: {last_error or 'Unknown error'}",
            status_code=last_status,
            url=url,
        )
