"""Snapshot ORM models: one immutable snapshot per refresh per mode, plus per-spec rows."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    DateTime as SQLDateTime,
    Enum as SQLEnum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tierlist.core.enums import Mode, Role, Tier
from tierlist.core.models import Base, JSONType, utc_now

MODE_ENUM = SQLEnum(Mode, name="mode_enum")
ROLE_ENUM = SQLEnum(Role, name="role_enum")
TIER_ENUM = SQLEnum(Tier, name="tier_enum")


class Snapshot(Base):
    """A timestamped, never-mutated set of spec scores for one mode."""

    __tablename__ = "snapshots"
    __table_args__ = (Index("idx_snapshots_mode_created", "mode", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    mode: Mapped[Mode] = mapped_column(MODE_ENUM, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        SQLDateTime(timezone=True),
        nullable=False,
        default=utc_now,
        comment="Application-set creation time; latest snapshot per mode has the max value",
    )

    metadata_json: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=True,
        comment="Source name, counts, sampling parameters and trigger",
    )

    scores: Mapped[List["SpecScore"]] = relationship(
        back_populates="snapshot", order_by="SpecScore.id"
    )
    builds: Mapped[List["SpecBuild"]] = relationship(back_populates="snapshot")
    stats: Mapped[List["SpecStats"]] = relationship(back_populates="snapshot")

    def __repr__(self) -> str:
        """Return string representation of the snapshot."""
        return f"<Snapshot(id={self.id}, mode='{self.mode.value}', created_at={self.created_at})>"


class _SpecRowMixin:
    """Columns shared by every per-spec snapshot row."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    snapshot_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("snapshots.id"), nullable=False, index=True
    )
    mode: Mapped[Mode] = mapped_column(MODE_ENUM, nullable=False)
    role: Mapped[Role] = mapped_column(ROLE_ENUM, nullable=False)
    class_name: Mapped[str] = mapped_column(String(64), nullable=False)
    spec_name: Mapped[str] = mapped_column(String(64), nullable=False)

    @property
    def spec_key(self) -> str:
        """Key joining score, build and stats rows of the same spec."""
        return f"{self.role.value}|{self.class_name}|{self.spec_name}"


class SpecScore(_SpecRowMixin, Base):
    """Normalized score, tier and rank of one spec within a snapshot."""

    __tablename__ = "spec_scores"
    __table_args__ = (
        UniqueConstraint(
            "snapshot_id", "role", "class_name", "spec_name", name="uq_spec_scores_spec"
        ),
    )

    score: Mapped[float] = mapped_column(Float, nullable=False)
    tier: Mapped[Tier] = mapped_column(TIER_ENUM, nullable=False)
    sample_size: Mapped[int] = mapped_column(Integer, nullable=False)
    rank: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="1-based rank within role by descending score"
    )
    previous_rank: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Rank in the preceding snapshot of the same mode; null when absent",
    )
    raw_json: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        JSONType, nullable=True, comment="Raw score breakdown for audit"
    )

    snapshot: Mapped[Snapshot] = relationship(back_populates="scores")

    def __repr__(self) -> str:
        """Return string representation of the spec score."""
        return (
            f"<SpecScore(snapshot_id={self.snapshot_id}, spec='{self.spec_key}', "
            f"score={self.score}, rank={self.rank})>"
        )


class SpecBuild(_SpecRowMixin, Base):
    """Derived build descriptor of one spec within a snapshot."""

    __tablename__ = "spec_builds"
    __table_args__ = (
        UniqueConstraint(
            "snapshot_id", "role", "class_name", "spec_name", name="uq_spec_builds_spec"
        ),
    )

    build_json: Mapped[Dict[str, Any]] = mapped_column(JSONType, nullable=False)
    build_source: Mapped[str] = mapped_column(String(64), nullable=False)
    build_import_string: Mapped[Optional[str]] = mapped_column(
        String, nullable=True, comment="Set only when an import string was derived"
    )

    snapshot: Mapped[Snapshot] = relationship(back_populates="builds")


class SpecStats(_SpecRowMixin, Base):
    """Derived stat priority of one spec within a snapshot."""

    __tablename__ = "spec_stats"
    __table_args__ = (
        UniqueConstraint(
            "snapshot_id", "role", "class_name", "spec_name", name="uq_spec_stats_spec"
        ),
    )

    stats_json: Mapped[Dict[str, Any]] = mapped_column(JSONType, nullable=False)

    snapshot: Mapped[Snapshot] = relationship(back_populates="stats")
