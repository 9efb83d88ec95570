"""Repository for snapshot persistence and the snapshot read view.

Writes happen in one transaction per snapshot: the snapshot row and every
per-spec score, build and stats row either all commit or none do. The
previous snapshot is only ever read, once, to look up prior ranks.
"""

from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import structlog
from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tierlist.core.enums import Mode, Role
from tierlist.features.aggregation import derive_most_common_build, derive_stat_priority
from tierlist.features.app_config.schemas import AppConfig
from tierlist.features.scoring.schemas import RankedSpec, SpecAggregate
from tierlist.features.scoring.tiering import assign_tier
from .models import Snapshot, SpecBuild, SpecScore, SpecStats
from .schemas import SnapshotSummary, SnapshotView, SpecView

logger = structlog.get_logger(__name__)

ROLE_ORDER = {role: index for index, role in enumerate(Role)}


def rank_specs(specs: Sequence[SpecAggregate]) -> List[RankedSpec]:
    """Assign 1-based ranks within each role by descending normalized score.

    Roles keep their first-seen order and equal scores keep their input order.
    """
    by_role: Dict[Role, List[SpecAggregate]] = defaultdict(list)
    for spec in specs:
        by_role[spec.role].append(spec)

    ranked: List[RankedSpec] = []
    for role_specs in by_role.values():
        ordered = sorted(role_specs, key=lambda spec: spec.score_normalized, reverse=True)
        for index, spec in enumerate(ordered):
            ranked.append(RankedSpec(**dict(spec), rank=index + 1))
    return ranked


class SnapshotRepository:
    """SQLAlchemy data access for snapshots and their per-spec rows."""

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy async session
        """
        self.db = db

    def _latest_stmt(self, mode: Mode):
        return (
            select(Snapshot)
            .where(Snapshot.mode == mode)
            .order_by(desc(Snapshot.created_at), desc(Snapshot.id))
            .limit(1)
        )

    async def get_latest_snapshot(self, mode: Mode) -> Optional[Snapshot]:
        """Most recent snapshot of a mode by creation time, ties going to the higher id."""
        result = await self.db.execute(self._latest_stmt(mode))
        return result.scalar_one_or_none()

    async def previous_rank_map(self, mode: Mode) -> Dict[str, int]:
        """Rank of every spec in the latest snapshot of ``mode``, keyed by role|class|spec."""
        previous = await self.get_latest_snapshot(mode)
        if previous is None:
            return {}

        stmt = select(SpecScore).where(SpecScore.snapshot_id == previous.id)
        result = await self.db.execute(stmt)
        return {score.spec_key: score.rank for score in result.scalars()}

    async def persist_snapshot(
        self,
        mode: Mode,
        scored: Sequence[SpecAggregate],
        config: AppConfig,
        metadata: Dict[str, Any],
    ) -> int:
        """
        Write a new snapshot with one score, build and stats row per spec.

        Args:
            mode: Mode of the snapshot
            scored: Scored specs that survived the sample-size filter
            config: Configuration used for tiers and derivation top-N
            metadata: Snapshot metadata (source, counts, trigger)

        Returns:
            Number of specs written
        """
        top_n = config.top_n_for(mode)

        try:
            previous_ranks = await self.previous_rank_map(mode)
            ranked = rank_specs(scored)

            snapshot = Snapshot(mode=mode, metadata_json=metadata)
            self.db.add(snapshot)

            for spec in ranked:
                build = derive_most_common_build(spec.raw_entries, top_n)
                stats = derive_stat_priority(spec.raw_entries, top_n)
                key_fields = {
                    "mode": mode,
                    "role": spec.role,
                    "class_name": spec.class_name,
                    "spec_name": spec.spec_name,
                }

                snapshot.scores.append(
                    SpecScore(
                        **key_fields,
                        score=spec.score_normalized,
                        tier=assign_tier(spec.score_normalized, config),
                        sample_size=spec.sample_size,
                        rank=spec.rank,
                        previous_rank=previous_ranks.get(spec.spec_key),
                        raw_json={
                            "score_raw": spec.score_raw,
                            "evidence_urls": spec.evidence_urls,
                            "raw_sample_count": len(spec.raw_entries),
                            "entry_count": spec.entry_count,
                        },
                    )
                )
                snapshot.builds.append(
                    SpecBuild(
                        **key_fields,
                        build_json=build.model_dump(mode="json"),
                        build_source=build.build_source,
                        build_import_string=(
                            build.build_import_string if build.type == "import_string" else None
                        ),
                    )
                )
                snapshot.stats.append(
                    SpecStats(**key_fields, stats_json=stats.model_dump(mode="json"))
                )

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Snapshot persisted",
            snapshot_id=snapshot.id,
            mode=mode.value,
            spec_count=len(ranked),
        )
        return len(ranked)

    async def get_snapshot_view(self, snapshot_id: int) -> Optional[SnapshotView]:
        """Snapshot joined with its per-spec rows, or None when it does not exist."""
        stmt = (
            select(Snapshot)
            .options(
                selectinload(Snapshot.scores),
                selectinload(Snapshot.builds),
                selectinload(Snapshot.stats),
            )
            .where(Snapshot.id == snapshot_id)
        )
        result = await self.db.execute(stmt)
        snapshot = result.scalar_one_or_none()
        if snapshot is None:
            return None
        return build_snapshot_view(snapshot)

    async def get_latest_snapshot_view(self, mode: Mode) -> Optional[SnapshotView]:
        """Latest snapshot view of a mode, or None before the first refresh."""
        latest = await self.get_latest_snapshot(mode)
        if latest is None:
            return None
        return await self.get_snapshot_view(latest.id)

    async def get_snapshot_created_at(
        self, mode: Mode, created_at: datetime
    ) -> Optional[Snapshot]:
        """Snapshot of a mode created at exactly ``created_at``."""
        stmt = (
            select(Snapshot)
            .where(Snapshot.mode == mode, Snapshot.created_at == created_at)
            .order_by(desc(Snapshot.id))
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_snapshots(
        self, mode: Optional[Mode] = None, limit: int = 20
    ) -> List[SnapshotSummary]:
        """Snapshot headers, newest first."""
        stmt = select(Snapshot).order_by(desc(Snapshot.created_at), desc(Snapshot.id)).limit(limit)
        if mode is not None:
            stmt = stmt.where(Snapshot.mode == mode)

        result = await self.db.execute(stmt)
        return [SnapshotSummary.model_validate(snapshot) for snapshot in result.scalars()]

    async def count_snapshots(self, mode: Optional[Mode] = None) -> int:
        """Number of stored snapshots, optionally for a single mode."""
        stmt = select(func.count(Snapshot.id))
        if mode is not None:
            stmt = stmt.where(Snapshot.mode == mode)

        result = await self.db.execute(stmt)
        return result.scalar_one()


def build_snapshot_view(snapshot: Snapshot) -> SnapshotView:
    """Join score, build and stats rows of a loaded snapshot by spec key."""
    builds = {build.spec_key: build for build in snapshot.builds}
    stats = {row.spec_key: row for row in snapshot.stats}

    specs: List[SpecView] = []
    for score in sorted(snapshot.scores, key=lambda row: (ROLE_ORDER[row.role], row.rank)):
        build = builds.get(score.spec_key)
        stat = stats.get(score.spec_key)
        specs.append(
            SpecView(
                id=score.id,
                mode=score.mode,
                role=score.role,
                class_name=score.class_name,
                spec_name=score.spec_name,
                score=score.score,
                tier=score.tier,
                sample_size=score.sample_size,
                rank=score.rank,
                previous_rank=score.previous_rank,
                raw_json=score.raw_json,
                build=build.build_json if build else None,
                build_source=build.build_source if build else None,
                build_import_string=build.build_import_string if build else None,
                stats=stat.stats_json if stat else None,
                rank_delta=(
                    score.previous_rank - score.rank if score.previous_rank is not None else 0
                ),
            )
        )

    return SnapshotView(
        snapshot_id=snapshot.id,
        mode=snapshot.mode,
        created_at=snapshot.created_at,
        metadata_json=snapshot.metadata_json,
        specs=specs,
    )
