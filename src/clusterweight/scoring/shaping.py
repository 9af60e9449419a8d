"""
Shaping functions applied to raw relevance.

Each `Shaping` member maps to a pure float -> float function. Two of them need care:
- `Exp` overflows for large inputs; we return `inf` and let the finite check in
  `renormalize.ensure_finite` reject the batch.
- `Log` is undefined at 0, which `LowRelevance` produces for a record sitting on a
  centroid. Only non-positive inputs are replaced by `LOG_FLOOR` (the smallest
  normal float), so every positive input keeps its exact logarithm and a record on
  a centroid gets the lowest finite score instead of `-inf`.
"""

from __future__ import annotations

import math
import sys
from typing import Callable

from clusterweight.config.settings import Shaping
from clusterweight.core.errors import UnknownModifier

LOG_FLOOR = sys.float_info.min


def identity(raw: float) -> float:
    return raw


def exp(raw: float) -> float:
    try:
        return math.exp(raw)
    except OverflowError:
        return math.inf


def log(raw: float) -> float:
    if raw > 0:
        return math.log(raw)
    return math.log(LOG_FLOOR)


def sigmoid(raw: float) -> float:
    """Logistic function, split by sign so `exp` never overflows.

    The result lies in [0, 1]: it rounds to exactly 1.0 above roughly 37 and
    underflows to 0.0 below roughly -745.
    """
    if raw >= 0:
        return 1.0 / (1.0 + math.exp(-raw))
    z = math.exp(raw)
    return z / (1.0 + z)


SHAPING_FUNCTIONS: dict[Shaping, Callable[[float], float]] = {
    Shaping.IDENTITY: identity,
    Shaping.LOG: log,
    Shaping.SIGMOID: sigmoid,
    Shaping.EXP: exp,
}


def shape(raw: float, shaping: Shaping) -> float:
    """Apply the configured shaping function to one raw relevance value."""
    try:
        func = SHAPING_FUNCTIONS[shaping]
    except KeyError:
        raise UnknownModifier(f"Unknown relevance function modifier: {shaping}") from None
    return func(raw)
