"""
Closest-centroid relevance policies.

Both policies read the same signal (distance to the nearest centroid) and differ
only in how it is interpreted:
- `HighRelevance`: `1 / (epsilon + d)`; records near a centroid weigh more.
- `LowRelevance`: `d`; records far from every centroid weigh more.
"""

from __future__ import annotations

from clusterweight.config.settings import EPSILON, Impact
from clusterweight.core.errors import UnknownStrategy


def raw_relevance(min_distance: float, impact: Impact, *, epsilon: float = EPSILON) -> float:
    """Map the distance to the closest centroid to a raw relevance score."""
    if impact == Impact.HIGH_RELEVANCE:
        return 1.0 / (epsilon + min_distance)
    if impact == Impact.LOW_RELEVANCE:
        return min_distance
    raise UnknownStrategy(f"Unknown strategy: {impact}")
