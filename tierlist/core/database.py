"""Async engine and session factories for PostgreSQL (production) and SQLite (tests)."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import get_global_settings


def create_engine_for_url(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine with pool settings suited to the backend.

    SQLite gets a busy timeout instead of a sized pool; server databases get
    pre-ping and hourly recycling so the long-running worker survives restarts
    of the database.
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(
            database_url,
            echo=echo,
            future=True,
            connect_args={"timeout": 30.0},
        )

    return create_async_engine(
        database_url,
        echo=echo,
        future=True,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=3600,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory shared by the API, the refresh worker and the tests.

    Objects stay usable after commit; the orchestrator reads a JobRun's id and
    metadata after the session that created it has closed.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


class DatabaseManager:
    """Owns the process-wide engine and session factory."""

    def __init__(self, database_url: Optional[str] = None, echo: Optional[bool] = None):
        """Initialize database manager with async engine.

        :param database_url: Override for the configured database URL
        :param echo: Override for SQL echo (defaults to the debug setting)
        """
        settings = get_global_settings()
        self.database_url = database_url or settings.database_url
        self.engine = create_engine_for_url(
            self.database_url, echo=settings.debug if echo is None else echo
        )
        self.async_session_factory = create_session_factory(self.engine)

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session, rolling back on error."""
        async with self.async_session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        """Dispose of pooled connections."""
        await self.engine.dispose()


db_manager = DatabaseManager()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency providing a request-scoped session."""
    async with db_manager.get_session() as session:
        yield session
