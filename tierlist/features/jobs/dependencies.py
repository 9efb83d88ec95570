"""Dependency injection for the jobs feature."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tierlist.core import get_db
from .service import JobService


async def get_job_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> JobService:
    """
    Get job service instance.

    :param db: Database session
    :returns: JobService instance
    """
    return JobService(db)


# Type alias for dependency injection
JobServiceDep = Annotated[JobService, Depends(get_job_service)]
