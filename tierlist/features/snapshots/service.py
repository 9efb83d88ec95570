"""Snapshot service: thin read layer over the snapshot repository."""

from typing import List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from tierlist.core.enums import Mode
from .repository import SnapshotRepository
from .schemas import SnapshotSummary, SnapshotView

logger = structlog.get_logger(__name__)


class SnapshotService:
    """Service exposing snapshot views to the API."""

    def __init__(self, db: AsyncSession):
        """Initialize snapshot service."""
        self.repository = SnapshotRepository(db)

    async def get_latest(self, mode: Mode) -> Optional[SnapshotView]:
        """Latest snapshot view of a mode."""
        view = await self.repository.get_latest_snapshot_view(mode)
        if view is None:
            logger.debug("No snapshot yet", mode=mode.value)
        return view

    async def get_by_id(self, snapshot_id: int) -> Optional[SnapshotView]:
        """Snapshot view by id."""
        return await self.repository.get_snapshot_view(snapshot_id)

    async def list_history(
        self, mode: Optional[Mode] = None, limit: int = 20
    ) -> List[SnapshotSummary]:
        """Snapshot headers, newest first."""
        return await self.repository.list_snapshots(mode=mode, limit=limit)
