"""
Cache stores for upstream responses and OAuth tokens.

Keys are namespaced by purpose by the caller (see ``core.http``); stores only
deal with opaque string values and a per-entry TTL.
"""

import time
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

import structlog
from redis import asyncio as redis_asyncio

from .config import get_global_settings

logger = structlog.get_logger(__name__)


class CacheStore(ABC):
    """Key/value store with per-entry expiry."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the cached value, or None on miss or expiry."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value that expires after ``ttl_seconds``."""
        pass

    async def close(self) -> None:
        """Release any held connections."""
        return None


class RedisCacheStore(CacheStore):
    """Redis-backed cache store (one round trip per operation)."""

    def __init__(self, redis_url: str):
        """
        Initialize the Redis cache store.

        Args:
            redis_url: Redis connection URL
        """
        self.redis_url = redis_url
        self._redis = redis_asyncio.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
            retry_on_timeout=True,
        )

    async def get(self, key: str) -> Optional[str]:
        return await self._redis.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._redis.set(key, value, ex=ttl_seconds)

    async def close(self) -> None:
        await self._redis.aclose()


class MemoryCacheStore(CacheStore):
    """In-process TTL cache, used in tests and single-process deployments."""

    def __init__(self, maxsize: int = 1000):
        """
        Initialize TTL cache.

        Args:
            maxsize: Maximum number of entries
        """
        self.maxsize = maxsize
        self.cache: Dict[str, Tuple[str, float]] = {}
        self._hits = 0
        self._misses = 0

    async def get(self, key: str) -> Optional[str]:
        if key in self.cache:
            value, expiry = self.cache[key]
            if time.monotonic() < expiry:
                self._hits += 1
                logger.debug("Cache hit", key=key, hits=self._hits)
                return value
            # Remove expired entry
            del self.cache[key]
            logger.debug("Cache expired", key=key)
        self._misses += 1
        return None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        # If cache is full, remove oldest entry
        if len(self.cache) >= self.maxsize and key not in self.cache:
            oldest_key = next(iter(self.cache))
            del self.cache[oldest_key]
            logger.debug("Cache eviction", key=oldest_key, reason="full")

        self.cache[key] = (value, time.monotonic() + ttl_seconds)
        logger.debug("Cache set", key=key, ttl=ttl_seconds)

    def clear(self) -> None:
        """Clear all entries from cache."""
        count = len(self.cache)
        self.cache.clear()
        self._hits = 0
        self._misses = 0
        logger.info("Cache cleared", entries_removed=count)

    def stats(self) -> Dict[str, float]:
        """Get cache statistics."""
        total = self._hits + self._misses
        return {
            "size": len(self.cache),
            "maxsize": self.maxsize,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / total if total > 0 else 0.0,
        }

    def __len__(self) -> int:
        """Get number of entries in cache."""
        return len(self.cache)


def create_cache_store() -> CacheStore:
    """Build the cache store selected by ``CACHE_BACKEND``."""
    settings = get_global_settings()
    if settings.cache_backend == "memory":
        return MemoryCacheStore()
    return RedisCacheStore(settings.redis_url)
