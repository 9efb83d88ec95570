"""Shared fixtures: a file-backed SQLite database and performance-entry factories."""

from typing import Callable, Dict, List, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tierlist.core.database import create_engine_for_url, create_session_factory
from tierlist.core.enums import Mode, Role
from tierlist.features.providers.schemas import PerformanceEntry
from tierlist.models import Base

EntryFactory = Callable[..., PerformanceEntry]


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Async engine on a fresh SQLite file with every table created."""
    engine = create_engine_for_url(f"sqlite+aiosqlite:///{tmp_path / 'tierlist.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    """Session factory configured like the application's."""
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """A single session for repository and service tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_entry() -> EntryFactory:
    """Build a PerformanceEntry with sensible defaults."""

    def _make_entry(
        spec_name: str = "Fire",
        class_name: str = "Mage",
        role: Role = Role.DPS,
        metric: float = 20.0,
        mode: Mode = Mode.MYTHIC_PLUS,
        timed: Optional[bool] = None,
        build_string: Optional[str] = None,
        talent_nodes: Optional[List[str]] = None,
        stats: Optional[Dict[str, float]] = None,
        evidence_url: str = "https://www.warcraftlogs.com",
    ) -> PerformanceEntry:
        return PerformanceEntry(
            mode=mode,
            role=role,
            class_name=class_name,
            spec_name=spec_name,
            metric=metric,
            timed=timed,
            build_string=build_string,
            talent_nodes=talent_nodes,
            stats=stats,
            evidence_url=evidence_url,
        )

    return _make_entry


@pytest.fixture
def make_group(make_entry) -> Callable[..., List[PerformanceEntry]]:
    """Build ``count`` entries for one spec."""

    def _make_group(count: int, **kwargs) -> List[PerformanceEntry]:
        return [make_entry(**kwargs) for _ in range(count)]

    return _make_group
