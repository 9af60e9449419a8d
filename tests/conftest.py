from __future__ import annotations

from collections.abc import Sequence

import pytest

from clusterweight.config.settings import Settings
from clusterweight.domain.models import Dataset, Record


class FixedCentroidClusterer:
    """Stub clusterer returning preset centroids (keeps scorer tests independent of k-means)."""

    def __init__(self, centroids: list[tuple[float, ...]]):
        self.centroids = centroids
        self.calls: list[list[tuple[float, ...]]] = []

    def fit(self, vectors: Sequence[tuple[float, ...]]) -> list[tuple[float, ...]]:
        self.calls.append(list(vectors))
        return list(self.centroids)


def make_dataset(rows: list[tuple[float, ...]], *, label: str | None = "class", weight: float = 1.0) -> Dataset:
    attributes = [f"x{i}" for i in range(len(rows[0]))] if rows else ["x0"]
    records = []
    for i, row in enumerate(rows):
        values: dict[str, float | str | None] = {a: float(v) for a, v in zip(attributes, row)}
        if label:
            values[label] = "pos" if i % 2 == 0 else "neg"
        records.append(Record(values=values, weight=weight))
    return Dataset(attributes=[*attributes, label] if label else attributes, label=label, records=records)


def make_settings(**relevance: str) -> Settings:
    return Settings.model_validate({"relevance": relevance})


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    # Keep developer env vars from changing the packaged defaults during tests.
    for name in ("CLUSTERWEIGHT_IMPACT", "CLUSTERWEIGHT_SHAPING", "CLUSTERWEIGHT_CONFIG_PATH", "CLUSTERWEIGHT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
