"""
X-means clustering (Pelleg & Moore, 2000) on top of scikit-learn's `KMeans`.

The scorer only needs centroids, and it needs them without knowing the number of
clusters up front. X-means starts from `min_clusters` k-means centroids and keeps
splitting clusters in two while the Bayesian Information Criterion says the split
model explains that cluster's points better than the single centroid:

    1. improve-params:    run k-means from the current centers
    2. improve-structure: for each cluster, fit a 2-means locally and keep the
                          children when BIC(children) > BIC(parent)
    3. stop when nothing splits, `max_clusters` is reached, or after
       `max_iterations` rounds

Any failure (too few points, non-numeric input, scikit-learn errors) is raised as
`ClusteringFailure`; the scorer propagates it unchanged.
"""

from __future__ import annotations

import logging
import math
import warnings
from collections.abc import Sequence
from typing import Protocol

import numpy as np
from sklearn.cluster import KMeans
from sklearn.exceptions import ConvergenceWarning

from clusterweight.config.settings import MAX_CLUSTERS, MAX_ITERATIONS, MIN_CLUSTERS, ClusteringSettings
from clusterweight.core.distance import FeatureVector
from clusterweight.core.errors import ClusteringFailure

logger = logging.getLogger(__name__)

# Floor for the pooled variance estimate; a zero variance makes the log-likelihood unbounded.
_MIN_VARIANCE = float(np.finfo(float).eps)


class Clusterer(Protocol):
    def fit(self, vectors: Sequence[FeatureVector]) -> list[FeatureVector]:
        """Return the centroids found for `vectors` (at least one)."""
        ...


def bic_score(points: np.ndarray, centers: np.ndarray, labels: np.ndarray) -> float:
    """BIC of a spherical Gaussian mixture with one shared variance (higher is better)."""
    r, m = points.shape
    k = len(centers)
    sq_dist = float(((points - centers[labels]) ** 2).sum())
    variance = sq_dist / (r - k) if r > k else 0.0
    variance = max(variance, _MIN_VARIANCE)

    log_likelihood = 0.0
    for size in np.bincount(labels, minlength=k):
        if size == 0:
            continue
        log_likelihood += (
            size * math.log(size)
            - size * math.log(r)
            - size / 2.0 * math.log(2.0 * math.pi)
            - size * m / 2.0 * math.log(variance)
            - (size - k) / 2.0
        )
    n_params = (k - 1) + m * k + 1
    return log_likelihood - n_params / 2.0 * math.log(r)


class XMeansClusterer:
    """Cluster feature vectors, discovering the number of clusters between the two bounds."""

    def __init__(
        self,
        *,
        min_clusters: int = MIN_CLUSTERS,
        max_clusters: int = MAX_CLUSTERS,
        max_iterations: int = MAX_ITERATIONS,
        random_state: int | None = 0,
    ):
        if min_clusters < 1:
            raise ClusteringFailure("min_clusters must be >= 1")
        if max_clusters < min_clusters:
            raise ClusteringFailure("max_clusters must be >= min_clusters")
        if max_iterations < 1:
            raise ClusteringFailure("max_iterations must be >= 1")
        self.min_clusters = int(min_clusters)
        self.max_clusters = int(max_clusters)
        self.max_iterations = int(max_iterations)
        self.random_state = random_state

    @classmethod
    def from_settings(cls, settings: ClusteringSettings) -> "XMeansClusterer":
        return cls(
            min_clusters=settings.min_clusters,
            max_clusters=settings.max_clusters,
            max_iterations=settings.max_iterations,
            random_state=settings.random_state,
        )

    def _as_array(self, vectors: Sequence[FeatureVector]) -> np.ndarray:
        if len(vectors) < 2:
            raise ClusteringFailure(f"X-means needs at least 2 instances, got {len(vectors)}.")
        try:
            x = np.asarray(vectors, dtype=float)
        except (TypeError, ValueError) as exc:
            raise ClusteringFailure(f"Feature vectors are not a numeric matrix: {exc}") from exc
        if x.ndim != 2 or x.shape[1] == 0:
            raise ClusteringFailure("Feature vectors must be non-empty and of equal length.")
        if not np.isfinite(x).all():
            raise ClusteringFailure("Feature vectors contain NaN or infinite values.")
        return x

    def _kmeans(self, x: np.ndarray, k: int, init: np.ndarray | None = None) -> KMeans:
        model = KMeans(
            n_clusters=k,
            init="k-means++" if init is None else init,
            n_init=10 if init is None else 1,
            max_iter=self.max_iterations,
            random_state=self.random_state,
        )
        try:
            with warnings.catch_warnings():
                # Duplicate points can leave fewer distinct clusters than requested; the centers are still usable.
                warnings.simplefilter("ignore", ConvergenceWarning)
                model.fit(x)
        except Exception as exc:
            raise ClusteringFailure(f"k-means with k={k} failed: {exc}") from exc
        return model

    def _improve_structure(self, x: np.ndarray, centers: np.ndarray, labels: np.ndarray, budget: int) -> np.ndarray:
        candidates: list[tuple[float, int, np.ndarray]] = []
        for j, center in enumerate(centers):
            points = x[labels == j]
            # Two children need more points than centers to estimate a variance.
            if len(points) <= 2 or len(np.unique(points, axis=0)) < 2:
                continue
            parent_bic = bic_score(points, center[np.newaxis, :], np.zeros(len(points), dtype=int))
            children = self._kmeans(points, 2)
            child_bic = bic_score(points, children.cluster_centers_, children.labels_)
            if child_bic > parent_bic:
                candidates.append((child_bic - parent_bic, j, children.cluster_centers_))

        candidates.sort(key=lambda c: c[0], reverse=True)
        split = {j: child_centers for _, j, child_centers in candidates[:budget]}
        out: list[np.ndarray] = []
        for j, center in enumerate(centers):
            if j in split:
                out.extend(split[j])
            else:
                out.append(center)
        return np.asarray(out)

    def fit(self, vectors: Sequence[FeatureVector]) -> list[FeatureVector]:
        x = self._as_array(vectors)
        n_distinct = len(np.unique(x, axis=0))
        k_min = min(self.min_clusters, n_distinct)
        k_max = min(self.max_clusters, n_distinct)

        centers: np.ndarray | None = None
        k = k_min
        for iteration in range(self.max_iterations):
            model = self._kmeans(x, k, init=centers)
            centers = model.cluster_centers_
            if k >= k_max:
                break
            improved = self._improve_structure(x, centers, model.labels_, budget=k_max - k)
            logger.debug("x-means round %d: k=%d -> %d", iteration + 1, k, len(improved))
            if len(improved) == k:
                break
            centers, k = improved, len(improved)
        else:
            logger.info("x-means stopped after max_iterations=%d with k=%d", self.max_iterations, k)

        if centers is None or len(centers) == 0:
            raise ClusteringFailure("X-means produced no centroids.")
        logger.debug("x-means converged: n=%d clusters=%d", len(x), len(centers))
        return [tuple(float(v) for v in c) for c in centers]
