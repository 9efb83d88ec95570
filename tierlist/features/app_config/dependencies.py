"""Dependency injection for the app config feature."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tierlist.core import get_db
from .service import AppConfigService


async def get_app_config_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AppConfigService:
    """
    Get app config service instance.

    :param db: Database session
    :returns: AppConfigService instance
    """
    return AppConfigService(db)


# Type alias for dependency injection
AppConfigServiceDep = Annotated[AppConfigService, Depends(get_app_config_service)]
