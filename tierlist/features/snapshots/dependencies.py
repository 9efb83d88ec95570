"""Dependency injection for the snapshots feature."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tierlist.core import get_db
from .service import SnapshotService


async def get_snapshot_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SnapshotService:
    """
    Get snapshot service instance.

    :param db: Database session
    :returns: SnapshotService instance
    """
    return SnapshotService(db)


# Type alias for dependency injection
SnapshotServiceDep = Annotated[SnapshotService, Depends(get_snapshot_service)]
