"""Job run model recording every refresh execution attempt."""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import (
    DateTime as SQLDateTime,
    Enum as SQLEnum,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from tierlist.core.enums import JobStatus, Mode
from tierlist.core.models import Base, JSONType, utc_now


class JobRun(Base):
    """One refresh execution: RUNNING, then SUCCESS or FAILED."""

    __tablename__ = "job_runs"
    __table_args__ = (Index("idx_job_runs_started", "started_at"),)

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Unique identifier for the job run",
    )

    mode: Mapped[Optional[Mode]] = mapped_column(
        SQLEnum(Mode, name="mode_enum"),
        nullable=True,
        comment="Requested mode; null when every mode was refreshed",
    )

    status: Mapped[JobStatus] = mapped_column(
        SQLEnum(JobStatus, name="job_status_enum"),
        nullable=False,
        default=JobStatus.RUNNING,
        index=True,
    )

    trigger: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="What requested the run (manual, cron, interval, seed)",
    )

    started_at: Mapped[datetime] = mapped_column(
        SQLDateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    finished_at: Mapped[Optional[datetime]] = mapped_column(
        SQLDateTime(timezone=True),
        nullable=True,
    )

    duration_ms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    items_updated: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Specs written across every refreshed mode",
    )

    error_message: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Error message if the run failed",
    )

    metadata_json: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=True,
        comment="Trigger, requested mode and per-mode counts",
    )

    def __repr__(self) -> str:
        """Return string representation of the job run."""
        return f"<JobRun(id={self.id}, status='{self.status.value}', trigger='{self.trigger}')>"
