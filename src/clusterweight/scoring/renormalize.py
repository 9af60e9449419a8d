"""
Batch-wide renormalization of shaped relevance scores.

Weights must be strictly positive. When the smallest shaped score is <= 0 the whole
batch is shifted by the same constant so the new minimum is exactly 1.0. A uniform
additive shift keeps ordering and pairwise differences intact, which is why it can
only be decided after every record has been scored.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from clusterweight.core.errors import NonFiniteWeight


def ensure_finite(scores: Sequence[float]) -> None:
    """Raise `NonFiniteWeight` for the first NaN or infinite score."""
    for i, value in enumerate(scores):
        if not math.isfinite(value):
            raise NonFiniteWeight(i, value)


def renormalization_shift(scores: Sequence[float]) -> float:
    """Return the constant to add to every score (0.0 when none is needed)."""
    if not scores:
        return 0.0
    lowest = min(scores)
    if lowest <= 0:
        return -lowest + 1.0
    return 0.0


def renormalize(scores: Sequence[float]) -> tuple[list[float], float]:
    """Shift all scores so they are strictly positive; returns (scores, shift)."""
    ensure_finite(scores)
    shift = renormalization_shift(scores)
    if shift == 0.0:
        return list(scores), 0.0
    shifted = [s + shift for s in scores]
    ensure_finite(shifted)
    return shifted, shift
