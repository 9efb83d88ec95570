"""Snapshots feature - persisted tier lists and their read view."""

from .models import Snapshot, SpecBuild, SpecScore, SpecStats
from .repository import SnapshotRepository, build_snapshot_view, rank_specs
from .router import router as snapshots_router
from .schemas import SnapshotSummary, SnapshotView, SpecView
from .service import SnapshotService

__all__ = [
    "build_snapshot_view",
    "rank_specs",
    "Snapshot",
    "SnapshotRepository",
    "SnapshotService",
    "SnapshotSummary",
    "SnapshotView",
    "snapshots_router",
    "SpecBuild",
    "SpecScore",
    "SpecStats",
    "SpecView",
]
