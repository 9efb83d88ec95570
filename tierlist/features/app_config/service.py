"""Service for loading and updating the singleton application configuration."""

from typing import Any

import structlog
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import AppConfigRecord
from .schemas import DEFAULT_APP_CONFIG, AppConfig

logger = structlog.get_logger(__name__)

APP_CONFIG_ID = 1


class AppConfigService:
    """Service for handling application configuration operations."""

    def __init__(self, db: AsyncSession):
        """Initialize app config service."""
        self.db = db

    async def _get_record(self) -> AppConfigRecord | None:
        stmt = select(AppConfigRecord).where(AppConfigRecord.id == APP_CONFIG_ID)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def ensure_app_config(self) -> AppConfig:
        """Load the stored configuration, creating or repairing it with defaults.

        A missing row is created with the defaults. A stored value that no
        longer validates is overwritten with the defaults.
        """
        record = await self._get_record()
        if record is None:
            self.db.add(
                AppConfigRecord(
                    id=APP_CONFIG_ID, config_json=DEFAULT_APP_CONFIG.model_dump(mode="json")
                )
            )
            await self.db.commit()
            logger.info("App config created with defaults")
            return DEFAULT_APP_CONFIG

        try:
            return AppConfig.model_validate(record.config_json)
        except ValidationError as e:
            logger.warning(
                "Stored app config is invalid, resetting to defaults",
                error_count=e.error_count(),
            )
            record.config_json = DEFAULT_APP_CONFIG.model_dump(mode="json")
            await self.db.commit()
            return DEFAULT_APP_CONFIG

    async def update_app_config(self, config: AppConfig) -> AppConfig:
        """Upsert a validated configuration."""
        payload = config.model_dump(mode="json")
        record = await self._get_record()
        if record is None:
            self.db.add(AppConfigRecord(id=APP_CONFIG_ID, config_json=payload))
        else:
            record.config_json = payload

        await self.db.commit()
        logger.info("App config updated")
        return config

    async def get_raw_app_config_json(self) -> Any:
        """Return the stored JSON as-is, or the defaults when nothing is stored."""
        record = await self._get_record()
        if record is None:
            return DEFAULT_APP_CONFIG.model_dump(mode="json")
        return record.config_json
