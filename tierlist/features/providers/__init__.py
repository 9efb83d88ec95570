"""Providers feature - upstream ranking sources normalized to PerformanceEntry."""

from typing import Optional

from tierlist.core.config import Settings, get_global_settings
from tierlist.core.enums import Mode
from tierlist.core.http import CachedHttpClient
from .base import PerformanceProvider, load_fixture
from .raiderio import RaiderIOMythicPlusProvider
from .schemas import PerformanceEntry
from .warcraftlogs import (
    WarcraftLogsClient,
    WarcraftLogsMythicPlusProvider,
    WarcraftLogsRaidProvider,
)


def get_provider(
    mode: Mode, http: CachedHttpClient, settings: Optional[Settings] = None
) -> PerformanceProvider:
    """Build the provider configured for a mode."""
    settings = settings or get_global_settings()
    if mode is Mode.RAID:
        return WarcraftLogsRaidProvider(http, settings)
    if settings.dungeon_provider == "raiderio":
        return RaiderIOMythicPlusProvider(http, settings)
    return WarcraftLogsMythicPlusProvider(http, settings)


__all__ = [
    "get_provider",
    "load_fixture",
    "PerformanceEntry",
    "PerformanceProvider",
    "RaiderIOMythicPlusProvider",
    "WarcraftLogsClient",
    "WarcraftLogsMythicPlusProvider",
    "WarcraftLogsRaidProvider",
]
