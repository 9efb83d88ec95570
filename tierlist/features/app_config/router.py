"""Admin endpoints for reading and updating the tunable configuration."""

from fastapi import APIRouter, HTTPException
import structlog

from .dependencies import AppConfigServiceDep
from .schemas import AppConfig

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/admin/config", tags=["admin"])


@router.get("", response_model=AppConfig)
async def get_app_config(config_service: AppConfigServiceDep):
    """
    Get the current application configuration.

    Creates the default configuration on first access.
    """
    try:
        return await config_service.ensure_app_config()
    except Exception as e:
        logger.error("Failed to load app config", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="Internal server error retrieving configuration",
        )


@router.put("", response_model=AppConfig)
async def update_app_config(config: AppConfig, config_service: AppConfigServiceDep):
    """
    Replace the application configuration.

    The body is validated before it reaches the store; the next refresh run
    picks it up.
    """
    try:
        return await config_service.update_app_config(config)
    except Exception as e:
        logger.error("Failed to update app config", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="Internal server error updating configuration",
        )
