"""Base class shared by all performance providers."""

import asyncio
import inspect
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Awaitable, ClassVar, Iterable, Optional, TypeVar

import structlog

from tierlist.core.config import Settings, get_global_settings
from tierlist.core.enums import Mode
from tierlist.core.http import CachedHttpClient
from tierlist.features.app_config.schemas import AppConfig
from .schemas import PerformanceEntry
from .transformers import transform_fixture_row

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_FIXTURES_DIR = Path(__file__).resolve().parents[2] / "fixtures"


async def load_fixture(file_name: str, fixtures_dir: Optional[str] = None) -> Any:
    """Read and decode a JSON fixture file."""
    path = Path(fixtures_dir) if fixtures_dir else DEFAULT_FIXTURES_DIR
    raw = await asyncio.to_thread((path / file_name).read_text, encoding="utf-8")
    return json.loads(raw)


async def gather_limited(
    semaphore: asyncio.Semaphore, awaitables: Iterable[Awaitable[T]]
) -> list[T]:
    """Await all awaitables with at most ``semaphore`` of them in flight.

    Results keep the input order. The first failure cancels the remaining
    requests, waits for them to unwind and is re-raised as-is.
    """
    pending = list(awaitables)

    async def _run(awaitable: Awaitable[T]) -> T:
        async with semaphore:
            return await awaitable

    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(_run(awaitable)) for awaitable in pending]
    except ExceptionGroup as error:
        # Requests cancelled before they started were never awaited
        for awaitable in pending:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
        raise error.exceptions[0] from None

    return [task.result() for task in tasks]


class PerformanceProvider(ABC):
    """Fetches performance entries for one mode from one upstream source.

    Subclasses implement ``_fetch_live``; mock mode is handled here and maps
    the provider's fixture file 1:1 into entries.
    """

    mode: ClassVar[Mode]
    source_name: ClassVar[str]
    fixture_name: ClassVar[str]

    def __init__(self, http: CachedHttpClient, settings: Optional[Settings] = None):
        """Initialize the provider.

        Args:
            http: Shared caching HTTP client.
            settings: Environment settings (defaults to the global settings).
        """
        self.http = http
        self.settings = settings or get_global_settings()

    async def fetch_entries(self, config: AppConfig) -> list[PerformanceEntry]:
        """Fetch and normalize entries for this provider's mode."""
        if self.settings.mock_mode:
            entries = await self._load_fixture_entries()
            logger.info(
                "Loaded fixture entries",
                source=self.source_name,
                mode=self.mode.value,
                entry_count=len(entries),
            )
            return entries
        return await self._fetch_live(config)

    async def _load_fixture_entries(self) -> list[PerformanceEntry]:
        rows = await load_fixture(self.fixture_name, self.settings.fixtures_dir)
        return [transform_fixture_row(row, self.mode) for row in rows]

    @abstractmethod
    async def _fetch_live(self, config: AppConfig) -> list[PerformanceEntry]:
        """Fetch entries from the live upstream."""
        pass
