"""
Euclidean distance helpers.

Feature vectors and centroids are plain float tuples with the label already
removed, so both sides of every distance must have the same length.
"""

from __future__ import annotations

from collections.abc import Sequence
from math import sqrt

from clusterweight.core.errors import ClusteringFailure, DimensionMismatch

FeatureVector = tuple[float, ...]


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Compute the L2 norm of `a - b`."""
    if len(a) != len(b):
        raise DimensionMismatch(f"Cannot compare vectors of length {len(a)} and {len(b)}.")
    return sqrt(sum((float(x) - float(y)) ** 2 for x, y in zip(a, b)))


def distances_to_all(vector: Sequence[float], centroids: Sequence[Sequence[float]]) -> list[float]:
    """Distance from `vector` to every centroid, in centroid order."""
    return [euclidean_distance(vector, c) for c in centroids]


def min_distance(vector: Sequence[float], centroids: Sequence[Sequence[float]]) -> float:
    """Distance from `vector` to its closest centroid."""
    if not centroids:
        raise ClusteringFailure("No centroids available to measure distances against.")
    return min(distances_to_all(vector, centroids))
