"""Scoring engine: per-spec aggregation, raw statistics and per-role normalization.

Both modes share the same shape:

1. group entries by (mode, role, class, spec) in first-seen order;
2. keep the top-N entries per group by metric;
3. compute a raw score per group (mode-specific statistic);
4. drop groups below the minimum sample size;
5. min-max normalize raw scores to 0-100 within each role.
"""

from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

import structlog

from tierlist.core.enums import Mode, Role
from tierlist.features.app_config.schemas import AppConfig
from tierlist.features.providers.schemas import PerformanceEntry
from .normalize import clamp_score, normalize_to_hundred
from .schemas import MAX_EVIDENCE_URLS, SpecAggregate
from .statistics import percentile, safe_median

logger = structlog.get_logger(__name__)

GroupKey = Tuple[Mode, Role, str, str]
RawStatistic = Callable[[Sequence[PerformanceEntry]], float]


def group_entries(
    entries: Iterable[PerformanceEntry],
) -> Dict[GroupKey, List[PerformanceEntry]]:
    """Group entries by (mode, role, class, spec), preserving first-seen order."""
    groups: Dict[GroupKey, List[PerformanceEntry]] = {}
    for entry in entries:
        key = (entry.mode, entry.role, entry.class_name, entry.spec_name)
        groups.setdefault(key, []).append(entry)
    return groups


def top_entries(entries: Sequence[PerformanceEntry], top_n: int) -> List[PerformanceEntry]:
    """Entries sorted by metric descending, truncated to ``top_n``."""
    # sorted() is stable, so equal metrics keep insertion order
    return sorted(entries, key=lambda entry: entry.metric, reverse=True)[:top_n]


def collect_evidence_urls(entries: Iterable[PerformanceEntry]) -> List[str]:
    """Distinct evidence URLs in entry order, at most five."""
    urls: List[str] = []
    for entry in entries:
        if entry.evidence_url and entry.evidence_url not in urls:
            urls.append(entry.evidence_url)
            if len(urls) == MAX_EVIDENCE_URLS:
                break
    return urls


def normalize_by_role(aggregates: List[SpecAggregate]) -> List[SpecAggregate]:
    """Set each aggregate's normalized score relative to the other specs of its role."""
    by_role: Dict[Role, List[int]] = defaultdict(list)
    for index, aggregate in enumerate(aggregates):
        by_role[aggregate.role].append(index)

    normalized = list(aggregates)
    for indexes in by_role.values():
        scores = normalize_to_hundred([aggregates[i].score_raw for i in indexes])
        for index, score in zip(indexes, scores):
            normalized[index] = aggregates[index].model_copy(
                update={"score_normalized": clamp_score(score)}
            )
    return normalized


def _score_groups(
    entries: Sequence[PerformanceEntry],
    top_n: int,
    min_sample_size: int,
    raw_statistic: RawStatistic,
) -> List[SpecAggregate]:
    aggregates: List[SpecAggregate] = []
    dropped = 0

    for (mode, role, class_name, spec_name), group in group_entries(entries).items():
        kept = top_entries(group, top_n)
        if len(kept) < min_sample_size:
            dropped += 1
            continue

        aggregates.append(
            SpecAggregate(
                mode=mode,
                role=role,
                class_name=class_name,
                spec_name=spec_name,
                score_raw=raw_statistic(kept),
                sample_size=len(kept),
                entry_count=len(group),
                evidence_urls=collect_evidence_urls(kept),
                raw_entries=kept,
            )
        )

    if dropped:
        logger.debug(
            "Dropped spec groups below minimum sample size",
            dropped=dropped,
            min_sample_size=min_sample_size,
        )

    return normalize_by_role(aggregates)


def score_mythic_plus(
    entries: Sequence[PerformanceEntry], config: AppConfig
) -> List[SpecAggregate]:
    """Score dungeon entries: median of key level adjusted by the timed bonus or penalty."""
    params = config.mythic_plus

    def adjusted_median(kept: Sequence[PerformanceEntry]) -> float:
        adjusted = [
            entry.metric + (params.timed_bonus if entry.timed else params.overtime_penalty)
            for entry in kept
        ]
        return safe_median(adjusted)

    return _score_groups(entries, params.top_n, params.min_sample_size, adjusted_median)


def score_raid(entries: Sequence[PerformanceEntry], config: AppConfig) -> List[SpecAggregate]:
    """Score raid entries: configured percentile of the top-N metrics."""
    params = config.raid

    def metric_percentile(kept: Sequence[PerformanceEntry]) -> float:
        return percentile([entry.metric for entry in kept], params.percentile)

    return _score_groups(entries, params.top_n, params.min_sample_size, metric_percentile)


def score_entries(
    mode: Mode, entries: Sequence[PerformanceEntry], config: AppConfig
) -> List[SpecAggregate]:
    """Score entries with the strategy of ``mode``."""
    if mode is Mode.MYTHIC_PLUS:
        return score_mythic_plus(entries, config)
    return score_raid(entries, config)
