"""Most-common-build derivation over a spec's contributing entries."""

from collections import Counter
from typing import Sequence

from tierlist.features.providers.schemas import PerformanceEntry
from tierlist.features.scoring.statistics import safe_divide
from .schemas import (
    DerivedBuild,
    ImportStringBuild,
    NodePickRate,
    NodeRatesBuild,
    UnavailableBuild,
)

MAX_NODE_RATES = 20
NO_BUILD_REASON = (
    "No build strings or talent node selections were present in source payloads."
)


def derive_most_common_build(
    entries: Sequence[PerformanceEntry], top_n: int
) -> DerivedBuild:
    """
    Describe the build played by the top performers.

    Preference order: the most frequent build string (ties go to the first
    one seen), then per-node pick rates over entries that reported talent
    nodes, then a not-available marker.

    Args:
        entries: Contributing entries, best first
        top_n: Number of leading entries to consider

    Returns:
        One of the derived build variants
    """
    top_entries = list(entries[:top_n])

    build_counts: Counter = Counter()
    for entry in top_entries:
        build = (entry.build_string or "").strip()
        if build:
            build_counts[build] += 1

    if build_counts:
        # most_common keeps first-inserted order among equal counts
        most_common_build, count = build_counts.most_common(1)[0]
        return ImportStringBuild(
            sample_size=len(top_entries),
            most_common_build=most_common_build,
            build_import_string=most_common_build,
            build_frequency=round(safe_divide(count, len(top_entries)), 3),
        )

    node_counts: Counter = Counter()
    with_nodes = 0
    for entry in top_entries:
        if not entry.talent_nodes:
            continue
        with_nodes += 1
        node_counts.update(entry.talent_nodes)

    if node_counts and with_nodes:
        rates = [
            NodePickRate(node=node, pick_rate=round(count / with_nodes, 3))
            for node, count in node_counts.items()
        ]
        rates.sort(key=lambda rate: rate.pick_rate, reverse=True)
        return NodeRatesBuild(sample_size=with_nodes, node_pick_rates=rates[:MAX_NODE_RATES])

    return UnavailableBuild(sample_size=len(top_entries), reason=NO_BUILD_REASON)
