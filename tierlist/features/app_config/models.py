"""Singleton row holding the tunable application configuration."""

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import DateTime as SQLDateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from tierlist.core.models import Base, JSONType, utc_now


class AppConfigRecord(Base):
    """Application configuration stored as validated JSON."""

    __tablename__ = "app_config"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        comment="Always 1; the table holds a single row",
    )

    config_json: Mapped[Dict[str, Any]] = mapped_column(
        JSONType,
        nullable=False,
        comment="Serialized AppConfig",
    )

    updated_at: Mapped[datetime] = mapped_column(
        SQLDateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
        comment="When the configuration was last written",
    )

    def __repr__(self) -> str:
        """Return string representation of the configuration row."""
        return f"<AppConfigRecord(id={self.id}, updated_at={self.updated_at})>"
