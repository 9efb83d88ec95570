"""App config feature - tunable scoring, tiering and fetch parameters."""

from .models import AppConfigRecord
from .router import router as app_config_router
from .schemas import (
    DEFAULT_APP_CONFIG,
    AppConfig,
    FetchConfig,
    MythicPlusConfig,
    RaidConfig,
    TierRange,
)
from .service import AppConfigService

__all__ = [
    "AppConfigRecord",
    "app_config_router",
    "DEFAULT_APP_CONFIG",
    "AppConfig",
    "FetchConfig",
    "MythicPlusConfig",
    "RaidConfig",
    "TierRange",
    "AppConfigService",
]
