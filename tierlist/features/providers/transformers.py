"""Transformers mapping provider payloads to PerformanceEntry objects.

Upstream payloads expose several alternately-named fields for the same value.
Each such value is read through an ordered list of extractors; the first one
that yields a usable value wins.
"""

import math
from typing import Any, Callable, Iterable, List, Mapping, Optional

import structlog

from tierlist.core.enums import Mode, Role
from .schemas import PerformanceEntry
from .spec_roles import get_role_for_spec

logger = structlog.get_logger(__name__)

Row = Mapping[str, Any]
FieldExtractor = Callable[[Row], Any]


def field(name: str) -> FieldExtractor:
    """Extractor reading a single top-level key."""
    return lambda row: row.get(name)


METRIC_EXTRACTORS: List[FieldExtractor] = [
    field(name)
    for name in (
        "amount",
        "total",
        "parsePercent",
        "score",
        "playerScore",
        "playerscore",
        "dps",
        "hps",
        "tankhps",
        "metric",
    )
]

TIMED_EXTRACTORS: List[FieldExtractor] = [
    field(name)
    for name in (
        "completedWithinTime",
        "completeInTime",
        "timed",
        "inTime",
        "wasCompletedInTime",
    )
]

RAIDERIO_KEY_LEVEL_EXTRACTORS: List[FieldExtractor] = [
    field("mythic_level"),
    field("key_level"),
]

RAIDERIO_TIMED_EXTRACTORS: List[FieldExtractor] = [
    field("is_completed_within_time"),
    field("timed"),
]


def is_finite_number(value: Any) -> bool:
    """True for real ints/floats (not bools) that are finite."""
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def first_finite_number(row: Row, extractors: Iterable[FieldExtractor]) -> Optional[float]:
    """Return the first finite number produced by the extractors, in order."""
    for extract in extractors:
        value = extract(row)
        if is_finite_number(value):
            return float(value)
    return None


def first_boolean(row: Row, extractors: Iterable[FieldExtractor]) -> Optional[bool]:
    """Return the first boolean produced by the extractors, or None if none is present."""
    for extract in extractors:
        value = extract(row)
        if isinstance(value, bool):
            return value
    return None


def parse_role_string(role: Optional[str]) -> Optional[Role]:
    """Interpret a free-form provider role string."""
    if not role or not isinstance(role, str):
        return None
    value = role.upper()
    if "TANK" in value:
        return Role.TANK
    if "HEAL" in value:
        return Role.HEALER
    if "DPS" in value or "DAMAGE" in value:
        return Role.DPS
    return None


def resolve_role(spec_name: str, explicit_role: Optional[str] = None) -> Optional[Role]:
    """Resolve a role from the explicit role string, else the static spec table."""
    return parse_role_string(explicit_role) or get_role_for_spec(spec_name)


def clean_stats(value: Any) -> Optional[dict[str, float]]:
    """Keep the finite numeric values of a stat mapping."""
    if not isinstance(value, Mapping):
        return None
    return {
        str(stat): float(amount)
        for stat, amount in value.items()
        if is_finite_number(amount)
    }


def clean_talent_nodes(value: Any) -> Optional[list[str]]:
    """Normalize a talent selection list to node identifiers."""
    if not isinstance(value, list):
        return None
    nodes = []
    for node in value:
        if isinstance(node, Mapping):
            node = node.get("talentID", node.get("id"))
        if isinstance(node, (str, int)) and not isinstance(node, bool):
            nodes.append(str(node))
    return nodes


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def extract_evidence_url(row: Row, base_url: str) -> str:
    """Link to the report fight when report and character are known."""
    report_id = row.get("reportID")
    character_id = row.get("characterID")
    if report_id and character_id:
        return f"{base_url}/reports/{report_id}#fight=last&type=summary&source={character_id}"
    return base_url


def transform_ranking_row(
    row: Row, mode: Mode, base_url: str
) -> Optional[PerformanceEntry]:
    """Map one Warcraft Logs character-ranking row, or None if it is unusable."""
    class_name = _non_empty_str(row.get("className"))
    spec_name = _non_empty_str(row.get("specName"))
    if not class_name or not spec_name:
        return None

    role = resolve_role(spec_name, row.get("role"))
    if role is None:
        return None

    metric = first_finite_number(row, METRIC_EXTRACTORS)
    if metric is None:
        return None

    combatant_info = row.get("combatantInfo") or {}
    stats = None
    if isinstance(combatant_info, Mapping):
        stats = clean_stats(
            combatant_info.get("secondaryStats") or combatant_info.get("stats")
        )

    return PerformanceEntry(
        mode=mode,
        role=role,
        class_name=class_name,
        spec_name=spec_name,
        metric=metric,
        timed=first_boolean(row, TIMED_EXTRACTORS) if mode is Mode.MYTHIC_PLUS else None,
        build_string=_non_empty_str(row.get("talentTree")),
        talent_nodes=clean_talent_nodes(row.get("talents")),
        stats=stats,
        evidence_url=extract_evidence_url(row, base_url),
        raw=dict(row),
    )


def transform_ranking_rows(
    rows: Iterable[Any], mode: Mode, base_url: str
) -> list[PerformanceEntry]:
    """Map ranking rows, silently dropping the unusable ones."""
    entries = []
    dropped = 0
    for row in rows:
        entry = (
            transform_ranking_row(row, mode, base_url)
            if isinstance(row, Mapping)
            else None
        )
        if entry is None:
            dropped += 1
            continue
        entries.append(entry)

    if dropped:
        logger.debug("Dropped unusable ranking rows", mode=mode.value, dropped=dropped)
    return entries


def transform_raiderio_runs(runs: Iterable[Any], base_url: str) -> list[PerformanceEntry]:
    """Expand Raider.IO runs into one entry per roster character."""
    entries = []
    for run in runs:
        if not isinstance(run, Mapping):
            continue
        key_level = first_finite_number(run, RAIDERIO_KEY_LEVEL_EXTRACTORS)
        if key_level is None or key_level <= 0:
            continue

        timed = first_boolean(run, RAIDERIO_TIMED_EXTRACTORS)
        roster = run.get("characters") or run.get("roster") or []

        for character in roster:
            if not isinstance(character, Mapping):
                continue
            class_name = _non_empty_str(
                character.get("class_name") or character.get("class")
            )
            spec_name = _non_empty_str(character.get("spec_name") or character.get("spec"))
            if not class_name or not spec_name:
                continue

            role = resolve_role(spec_name, character.get("role"))
            if role is None:
                continue

            entries.append(
                PerformanceEntry(
                    mode=Mode.MYTHIC_PLUS,
                    role=role,
                    class_name=class_name,
                    spec_name=spec_name,
                    metric=key_level,
                    timed=timed,
                    build_string=_non_empty_str(character.get("talent_build")),
                    talent_nodes=clean_talent_nodes(character.get("talents")),
                    stats=clean_stats(character.get("secondary_stats")),
                    evidence_url=character.get("profile_url")
                    or run.get("run_url")
                    or run.get("url")
                    or base_url,
                    raw=dict(run),
                )
            )
    return entries


def transform_fixture_row(row: Row, mode: Mode) -> PerformanceEntry:
    """Map a fixture row 1:1; fixtures are trusted to be well-formed."""
    metric = row["keyLevel"] if mode is Mode.MYTHIC_PLUS else row["parse"]
    return PerformanceEntry(
        mode=mode,
        role=Role(row["role"]),
        class_name=row["className"],
        spec_name=row["specName"],
        metric=metric,
        timed=row.get("timed") if mode is Mode.MYTHIC_PLUS else None,
        build_string=row.get("buildString"),
        talent_nodes=row.get("talentNodes"),
        stats=row.get("stats"),
        evidence_url=row["evidenceUrl"],
        raw=dict(row),
    )
