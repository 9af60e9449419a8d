from __future__ import annotations

# This module is the "orchestrator" for the relevance pipeline.
# It wires together:
# - label stripping (dataset -> feature vectors)
# - clustering (feature vectors -> centroids)
# - per-record math (closest-centroid distance -> raw relevance -> shaped relevance)
# - batch renormalization and the final write-back of weights
#
# All scores are computed before any record is touched, so an error never leaves a
# half-weighted dataset behind.

import logging
import time

from clusterweight.clustering.xmeans import Clusterer, XMeansClusterer
from clusterweight.config.settings import Settings, get_settings
from clusterweight.core.distance import min_distance
from clusterweight.dataset.labels import strip_label
from clusterweight.domain.models import Dataset, ScoringResult
from clusterweight.scoring.relevance import raw_relevance
from clusterweight.scoring.renormalize import renormalize
from clusterweight.scoring.shaping import shape

logger = logging.getLogger(__name__)


def apply_weights(dataset: Dataset, result: ScoringResult) -> None:
    if result.skipped:
        return
    for record, weight in zip(dataset.records, result.weights):
        record.weight = weight


class RelevanceScorer:
    """Compute clustering-based relevance weights for whole datasets."""

    def __init__(self, settings: Settings | None = None, *, clusterer: Clusterer | None = None):
        self.settings = settings or get_settings()
        self.clusterer = clusterer or XMeansClusterer.from_settings(self.settings.clustering)

    def score(self, dataset: Dataset) -> ScoringResult:
        """Score every record without mutating the dataset."""
        cfg = self.settings.relevance
        n = len(dataset.records)
        if n <= 1:
            # Nothing to cluster.
            return ScoringResult(impact=cfg.impact, shaping=cfg.shaping, weights=dataset.weights, skipped=True)

        t0 = time.perf_counter()
        vectors = strip_label(dataset)
        centroids = self.clusterer.fit(vectors)
        logger.info("Clustered %d records into %d centroids", n, len(centroids))

        distances: list[float] = []
        raw: list[float] = []
        shaped: list[float] = []
        for vector in vectors:
            d = min_distance(vector, centroids)
            r = raw_relevance(d, cfg.impact, epsilon=cfg.epsilon)
            distances.append(d)
            raw.append(r)
            shaped.append(shape(r, cfg.shaping))

        weights, shift = renormalize(shaped)
        if shift:
            logger.info("Shifted all relevances by %.6f (minimum shaped value %.6f)", shift, min(shaped))

        return ScoringResult(
            impact=cfg.impact,
            shaping=cfg.shaping,
            weights=weights,
            min_distances=distances,
            raw=raw,
            shaped=shaped,
            shift=shift,
            centroids=[list(c) for c in centroids],
            meta={"records": n, "elapsed_ms": int((time.perf_counter() - t0) * 1000)},
        )

    def process(self, dataset: Dataset) -> Dataset:
        """Overwrite every record's weight in place and return the same dataset."""
        apply_weights(dataset, self.score(dataset))
        return dataset


def score_dataset(
    dataset: Dataset, *, settings: Settings | None = None, clusterer: Clusterer | None = None
) -> ScoringResult:
    """Convenience wrapper: score `dataset` and write the weights back."""
    scorer = RelevanceScorer(settings, clusterer=clusterer)
    result = scorer.score(dataset)
    apply_weights(dataset, result)
    return result
