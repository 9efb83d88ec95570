"""Raider.IO provider for Mythic+ runs (alternative dungeon source)."""

import asyncio
from typing import List
from urllib.parse import urlencode, urljoin

import structlog

from tierlist.core.enums import Mode
from tierlist.features.app_config.schemas import AppConfig
from .base import PerformanceProvider, gather_limited
from .schemas import PerformanceEntry
from .transformers import transform_raiderio_runs

logger = structlog.get_logger(__name__)

RUN_PAGES = [0, 1, 2, 3]


class RaiderIOMythicPlusProvider(PerformanceProvider):
    """Top Mythic+ runs of the current season, one entry per roster character."""

    mode = Mode.MYTHIC_PLUS
    source_name = "raiderio_mythic_plus"
    fixture_name = "mythic-plus.json"

    def _page_url(self, page: int) -> str:
        base = urljoin(
            self.settings.raider_io_base_url, self.settings.raider_io_mplus_endpoint
        )
        query = urlencode({"season": "current", "region": "world", "page": page})
        return f"{base}?{query}"

    async def _fetch_live(self, config: AppConfig) -> list[PerformanceEntry]:
        semaphore = asyncio.Semaphore(config.fetch.api_concurrency)
        requests = [
            self.http.fetch_with_cache(
                self._page_url(page),
                cache_namespace="raiderio",
                cache_ttl_seconds=config.fetch.cache_ttl_seconds,
                retry_count=config.fetch.retry_count,
                retry_base_delay_ms=config.fetch.retry_base_delay_ms,
            )
            for page in RUN_PAGES
        ]
        responses = await gather_limited(semaphore, requests)

        runs: List = []
        for response in responses:
            if isinstance(response, dict):
                runs.extend(response.get("runs") or response.get("results") or [])

        logger.info("Fetched Mythic+ runs from Raider.IO", run_count=len(runs))
        return transform_raiderio_runs(runs, self.settings.raider_io_base_url)
