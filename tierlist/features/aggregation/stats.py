"""Secondary-stat priority derivation."""

import math
from typing import Dict, List, Sequence

from tierlist.features.providers.schemas import PerformanceEntry
from tierlist.features.scoring.statistics import safe_median
from .schemas import DerivedStatPriority, StatPriority, UnavailableStatPriority

AVAILABLE_NOTE = "Data-driven from top performers"
UNAVAILABLE_NOTE = "Not available from source payloads"


def derive_stat_priority(
    entries: Sequence[PerformanceEntry], top_n: int
) -> DerivedStatPriority:
    """Median of every reported stat, with stats ordered by descending median."""
    top_entries = list(entries[:top_n])
    values_by_stat: Dict[str, List[float]] = {}
    entries_with_stats = 0

    for entry in top_entries:
        contributed = False
        for stat, value in (entry.stats or {}).items():
            if isinstance(value, bool) or not math.isfinite(value):
                continue
            values_by_stat.setdefault(stat, []).append(value)
            contributed = True
        if contributed:
            entries_with_stats += 1

    if not values_by_stat:
        return UnavailableStatPriority(sample_size=len(top_entries), note=UNAVAILABLE_NOTE)

    medians = {stat: round(safe_median(values), 2) for stat, values in values_by_stat.items()}
    priority_order = sorted(medians, key=lambda stat: medians[stat], reverse=True)

    return StatPriority(
        sample_size=entries_with_stats,
        medians=medians,
        priority_order=priority_order,
        note=AVAILABLE_NOTE,
    )
