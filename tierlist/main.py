"""Main FastAPI application for the spec tier list API."""

from contextlib import asynccontextmanager
from typing import Any, Dict

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tierlist import __version__
from tierlist.core import db_manager, get_global_settings
from tierlist.core.logging import setup_logging
from tierlist.features.app_config import app_config_router
from tierlist.features.jobs import jobs_router
from tierlist.features.snapshots import snapshots_router

settings = get_global_settings()
setup_logging(settings.log_level, settings.log_format)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(
        "Starting up spec tier list API",
        mock_mode=settings.mock_mode,
        dungeon_provider=settings.dungeon_provider,
    )
    yield
    logger.info("Shutting down spec tier list API")
    await db_manager.close()


# OpenAPI tags metadata
tags_metadata = [
    {
        "name": "tier",
        "description": "Latest tier list per mode and snapshot history.",
    },
    {
        "name": "jobs",
        "description": "Refresh triggers and job run history.",
    },
    {
        "name": "admin",
        "description": "Tunable scoring, tiering and fetch configuration.",
    },
    {
        "name": "health",
        "description": "Health check endpoint.",
    },
]

app = FastAPI(
    title="Spec Tier List",
    description="""
    Tier list of World of Warcraft specializations built from top-performer
    rankings (Warcraft Logs, Raider.IO).

    * **Tier list**: latest snapshot per mode with rank changes
    * **Refresh**: trigger a refresh run and inspect job runs
    * **Admin**: read and update scoring configuration
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
    debug=settings.debug,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(snapshots_router, prefix="/api")
app.include_router(jobs_router, prefix="/api")
app.include_router(app_config_router, prefix="/api")


@app.get("/health", tags=["health"])
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint.

    Returns the health status of the application for monitoring tools and
    load balancers.
    """
    return {
        "status": "healthy",
        "message": "Application is running",
        "version": __version__,
        "debug": settings.debug,
        "mock_mode": settings.mock_mode,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tierlist.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
