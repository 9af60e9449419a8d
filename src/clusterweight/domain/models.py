"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- dataset inputs (`Dataset`, `Record`)
- scoring output (`ScoringResult`)

Keeping these models in one place helps:
- validation (reject bad inputs early),
- consistent JSON output across CLI/API.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from clusterweight.config.settings import Impact, Shaping

Value = float | str | None


class Record(BaseModel):
    """One dataset row. `weight` is the only field the scorer ever changes."""

    values: dict[str, Value]
    weight: float = 1.0


class Dataset(BaseModel):
    """An ordered batch of records sharing one attribute schema."""

    attributes: list[str]
    label: str | None = None
    records: list[Record] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_schema(self) -> "Dataset":
        if len(set(self.attributes)) != len(self.attributes):
            raise ValueError("dataset.attributes must be unique")
        if self.label is not None and self.label not in self.attributes:
            raise ValueError(f"label '{self.label}' is not one of the dataset attributes")
        known = set(self.attributes)
        for i, record in enumerate(self.records):
            extra = set(record.values) - known
            if extra:
                raise ValueError(f"record {i} has unknown attributes: {sorted(extra)}")
        return self

    def __len__(self) -> int:
        return len(self.records)

    @property
    def weights(self) -> list[float]:
        return [r.weight for r in self.records]


class ScoringResult(BaseModel):
    """Per-batch scoring output plus the intermediate values that produced it."""

    impact: Impact
    shaping: Shaping
    weights: list[float]
    min_distances: list[float] = Field(default_factory=list)
    raw: list[float] = Field(default_factory=list)
    shaped: list[float] = Field(default_factory=list)
    shift: float = 0.0
    centroids: list[list[float]] = Field(default_factory=list)
    skipped: bool = False
    meta: dict[str, Any] = Field(default_factory=dict)

    @property
    def n_clusters(self) -> int:
        return len(self.centroids)
