"""Refresh orchestrator: fetch, score and persist one snapshot per mode.

Every invocation writes exactly one ``JobRun``. It is created RUNNING in its
own committed session before any upstream work starts, then moved to SUCCESS
or FAILED. A run killed mid-way stays RUNNING; nothing here heals it.
"""

import time
from typing import Any, Callable, Dict, Optional

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import contextvars as structlog_contextvars

from tierlist.core.cache import create_cache_store
from tierlist.core.config import Settings, get_global_settings
from tierlist.core.database import db_manager
from tierlist.core.enums import JobStatus, Mode
from tierlist.core.http import CachedHttpClient
from tierlist.core.models import utc_now
from tierlist.features.app_config.schemas import AppConfig
from tierlist.features.app_config.service import AppConfigService
from tierlist.features.providers import PerformanceProvider, get_provider
from tierlist.features.scoring import score_entries
from tierlist.features.snapshots.repository import SnapshotRepository
from .models import JobRun
from .schemas import RefreshJobPayload, RefreshResult

logger = structlog.get_logger(__name__)

ProviderFactory = Callable[[Mode, CachedHttpClient, Optional[Settings]], PerformanceProvider]


class RefreshOrchestrator:
    """Runs one refresh for the requested mode(s) and records it as a JobRun."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        http: CachedHttpClient,
        settings: Optional[Settings] = None,
        provider_factory: ProviderFactory = get_provider,
    ):
        """Initialize the orchestrator.

        Args:
            session_factory: Factory for short-lived database sessions.
            http: Shared caching HTTP client handed to providers.
            settings: Environment settings (defaults to the global settings).
            provider_factory: Builds the provider of a mode.
        """
        self.session_factory = session_factory
        self.http = http
        self.settings = settings or get_global_settings()
        self.provider_factory = provider_factory

    async def _load_config(self) -> AppConfig:
        async with self.session_factory() as db:
            return await AppConfigService(db).ensure_app_config()

    async def _create_job_run(self, payload: RefreshJobPayload) -> JobRun:
        modes = payload.mode.modes()
        async with self.session_factory() as db:
            job_run = JobRun(
                mode=modes[0] if len(modes) == 1 else None,
                status=JobStatus.RUNNING,
                trigger=payload.trigger.value,
                started_at=utc_now(),
                items_updated=0,
                metadata_json={
                    "trigger": payload.trigger.value,
                    "requested_mode": payload.mode.value,
                },
            )
            db.add(job_run)
            await db.commit()
            await db.refresh(job_run)
            return job_run

    async def _finish_job_run(self, job_run_id: int, values: Dict[str, Any]) -> None:
        async with self.session_factory() as db:
            stmt = update(JobRun).where(JobRun.id == job_run_id).values(**values)
            await db.execute(stmt)
            await db.commit()

    async def refresh_mode(self, mode: Mode, config: AppConfig, trigger: str) -> int:
        """Fetch, score and persist one mode; returns the number of specs written."""
        provider = self.provider_factory(mode, self.http, self.settings)
        entries = await provider.fetch_entries(config)
        scored = score_entries(mode, entries, config)

        if not scored:
            logger.warning(
                "Skipping snapshot because no specs met scoring criteria",
                mode=mode.value,
                entry_count=len(entries),
            )
            return 0

        metadata: Dict[str, Any] = {
            "source": provider.source_name,
            "entry_count": len(entries),
            "scored_count": len(scored),
            "min_sample_size": config.min_sample_size_for(mode),
            "top_n": config.top_n_for(mode),
            "trigger": trigger,
        }
        if mode is Mode.RAID:
            metadata["percentile"] = config.raid.percentile

        async with self.session_factory() as db:
            return await SnapshotRepository(db).persist_snapshot(
                mode, scored, config, metadata
            )

    async def run(self, payload: Optional[RefreshJobPayload] = None) -> RefreshResult:
        """
        Execute a refresh run.

        Args:
            payload: Requested mode and trigger (defaults to ALL, manual)

        Returns:
            Total specs written and the JobRun id

        Raises:
            Exception: Any failure after the JobRun was created, once it is marked FAILED
        """
        payload = payload or RefreshJobPayload()
        start = time.monotonic()
        config = await self._load_config()
        job_run = await self._create_job_run(payload)

        structlog_contextvars.bind_contextvars(
            job_run_id=job_run.id,
            mode=payload.mode.value,
            trigger=payload.trigger.value,
        )
        counts: Dict[str, int] = {}
        try:
            logger.info("Refresh started")
            for mode in payload.mode.modes():
                counts[mode.value] = await self.refresh_mode(
                    mode, config, payload.trigger.value
                )
            updated = sum(counts.values())
        except Exception as error:
            duration_ms = _elapsed_ms(start)
            logger.error(
                "Refresh failed",
                error=str(error),
                error_type=type(error).__name__,
                duration_ms=duration_ms,
                exc_info=True,
            )
            await self._finish_job_run(
                job_run.id,
                {
                    "status": JobStatus.FAILED,
                    "finished_at": utc_now(),
                    "duration_ms": duration_ms,
                    "error_message": str(error),
                    "metadata_json": {**(job_run.metadata_json or {}), "counts": counts},
                },
            )
            raise
        else:
            duration_ms = _elapsed_ms(start)
            await self._finish_job_run(
                job_run.id,
                {
                    "status": JobStatus.SUCCESS,
                    "finished_at": utc_now(),
                    "duration_ms": duration_ms,
                    "items_updated": updated,
                    "metadata_json": {**(job_run.metadata_json or {}), "counts": counts},
                },
            )
            logger.info("Refresh completed", duration_ms=duration_ms, updated=updated)
            return RefreshResult(updated=updated, job_run_id=job_run.id)
        finally:
            structlog_contextvars.unbind_contextvars("job_run_id", "mode", "trigger")


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


async def run_refresh(
    payload: Optional[RefreshJobPayload] = None,
    settings: Optional[Settings] = None,
) -> RefreshResult:
    """Run a refresh with the global database manager and a fresh HTTP client."""
    cache = create_cache_store()
    try:
        async with CachedHttpClient(cache) as http:
            orchestrator = RefreshOrchestrator(
                db_manager.async_session_factory, http, settings=settings
            )
            return await orchestrator.run(payload)
    finally:
        await cache.close()
