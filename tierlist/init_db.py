"""Database initialization script using SQLAlchemy create_all().

Usage:
    python -m tierlist.init_db [init|drop|reset]
"""

import asyncio
import sys
from typing import NoReturn

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from tierlist.core.config import get_global_settings
from tierlist.core.database import create_engine_for_url, create_session_factory
from tierlist.core.logging import setup_logging
from tierlist.features.app_config.service import AppConfigService
from tierlist.models import Base

logger = structlog.get_logger(__name__)


def _create_engine() -> AsyncEngine:
    settings = get_global_settings()
    return create_engine_for_url(settings.database_url, echo=settings.debug)


async def init_db(engine: AsyncEngine | None = None, seed_config: bool = True) -> None:
    """Create every table defined in the ORM models.

    With ``seed_config`` the singleton app config row is created with the
    defaults (or repaired) so the first refresh run and the admin API find it.

    Raises:
        SQLAlchemyError: If database connection or table creation fails
    """
    owns_engine = engine is None
    engine = engine or _create_engine()
    try:
        async with engine.begin() as conn:
            logger.info("Creating database tables...")
            await conn.run_sync(Base.metadata.create_all)

        if seed_config:
            async with create_session_factory(engine)() as db:
                await AppConfigService(db).ensure_app_config()

        logger.info(
            "Database initialization completed successfully",
            tables_created=len(Base.metadata.tables),
            table_names=list(Base.metadata.tables.keys()),
        )
    except SQLAlchemyError as e:
        logger.error(
            "Database initialization failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise
    finally:
        if owns_engine:
            await engine.dispose()


async def drop_all_tables() -> None:
    """Drop all tables from the database.

    WARNING: This is destructive and will delete all data!
    """
    engine = _create_engine()
    try:
        logger.warning("Dropping all database tables...")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("All database tables dropped successfully")
    except SQLAlchemyError as e:
        logger.error(
            "Failed to drop database tables",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise
    finally:
        await engine.dispose()


async def reset_db() -> None:
    """Drop and recreate all tables."""
    logger.warning("Resetting database (drop + create)...")
    await drop_all_tables()
    await init_db()
    logger.info("Database reset completed successfully")


def main() -> NoReturn:
    """Run CLI for database initialization commands."""
    settings = get_global_settings()
    setup_logging(settings.log_level, settings.log_format)
    command = sys.argv[1] if len(sys.argv) > 1 else "init"
    commands = {"init": init_db, "drop": drop_all_tables, "reset": reset_db}

    if command not in commands:
        logger.error("Unknown command", command=command, valid=list(commands))
        sys.exit(2)

    try:
        asyncio.run(commands[command]())
    except Exception as e:
        logger.error("Database command failed", command=command, error=str(e))
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
