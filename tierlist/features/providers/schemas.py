"""Uniform performance-entry shape produced by every provider."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from tierlist.core.enums import Mode, Role


class PerformanceEntry(BaseModel):
    """One observed performance sample for one character."""

    model_config = ConfigDict(frozen=True)

    mode: Mode
    role: Role
    class_name: str
    spec_name: str
    metric: float = Field(..., description="Key level (Mythic+) or parse/score (raid)")
    timed: Optional[bool] = Field(None, description="Mythic+ only; None when unknown")
    build_string: Optional[str] = None
    talent_nodes: Optional[List[str]] = None
    stats: Optional[Dict[str, float]] = None
    evidence_url: str
    raw: Any = Field(None, repr=False, description="Provider row kept for audit")

    @property
    def spec_key(self) -> str:
        """Key identifying the spec within a mode."""
        return f"{self.role.value}|{self.class_name}|{self.spec_name}"
