"""Registry of every ORM model, imported before ``create_all``."""

from tierlist.core.models import Base
from tierlist.features.app_config.models import AppConfigRecord
from tierlist.features.jobs.models import JobRun
from tierlist.features.snapshots.models import Snapshot, SpecBuild, SpecScore, SpecStats

__all__ = [
    "AppConfigRecord",
    "Base",
    "JobRun",
    "Snapshot",
    "SpecBuild",
    "SpecScore",
    "SpecStats",
]
