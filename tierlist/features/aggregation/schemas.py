"""Derived build and stat-priority artifacts stored per spec per snapshot."""

from typing import Annotated, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

DERIVED_BUILD_SOURCE = "derived_from_top_performers"
NOT_AVAILABLE_SOURCE = "not_available"


class NodePickRate(BaseModel):
    """Share of contributing entries that picked a talent node."""

    model_config = ConfigDict(frozen=True)

    node: str
    pick_rate: float


class ImportStringBuild(BaseModel):
    """Most frequent build string among the top performers."""

    model_config = ConfigDict(frozen=True)

    type: Literal["import_string"] = "import_string"
    sample_size: int
    build_source: Literal["derived_from_top_performers"] = DERIVED_BUILD_SOURCE
    most_common_build: str
    build_import_string: str
    build_frequency: float


class NodeRatesBuild(BaseModel):
    """Talent-node pick rates when no build strings were reported."""

    model_config = ConfigDict(frozen=True)

    type: Literal["node_rates"] = "node_rates"
    sample_size: int
    build_source: Literal["derived_from_top_performers"] = DERIVED_BUILD_SOURCE
    node_pick_rates: List[NodePickRate]


class UnavailableBuild(BaseModel):
    """No build information in the source payloads."""

    model_config = ConfigDict(frozen=True)

    type: Literal["not_available"] = "not_available"
    sample_size: int
    build_source: Literal["not_available"] = NOT_AVAILABLE_SOURCE
    reason: str


DerivedBuild = Annotated[
    Union[ImportStringBuild, NodeRatesBuild, UnavailableBuild],
    Field(discriminator="type"),
]


class StatPriority(BaseModel):
    """Median secondary stats of the top performers, best stat first."""

    model_config = ConfigDict(frozen=True)

    available: Literal[True] = True
    sample_size: int = Field(..., description="Entries that contributed a stat value")
    medians: Dict[str, float]
    priority_order: List[str]
    note: str


class UnavailableStatPriority(BaseModel):
    """No stat snapshots in the source payloads."""

    model_config = ConfigDict(frozen=True)

    available: Literal[False] = False
    sample_size: int
    note: str


DerivedStatPriority = Union[StatPriority, UnavailableStatPriority]
