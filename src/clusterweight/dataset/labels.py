"""
Label stripping.

Clustering and distance computation only see numeric feature columns; the class
column is dropped first. Row order and count are preserved.
"""

from __future__ import annotations

import math

from clusterweight.core.distance import FeatureVector
from clusterweight.core.errors import InvalidFeatureValue
from clusterweight.domain.models import Dataset


def feature_names(dataset: Dataset) -> list[str]:
    """Attribute names in column order, label excluded."""
    return [a for a in dataset.attributes if a != dataset.label]


def _to_float(value: object, *, row: int, column: str) -> float:
    if value is None or isinstance(value, bool):
        raise InvalidFeatureValue(f"record {row}: feature '{column}' is missing or not numeric ({value!r})")
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidFeatureValue(f"record {row}: feature '{column}' is not numeric ({value!r})") from exc
    if math.isnan(out):
        raise InvalidFeatureValue(f"record {row}: feature '{column}' is missing (NaN)")
    return out


def strip_label(dataset: Dataset) -> list[FeatureVector]:
    """Return one label-free feature vector per record, in record order."""
    columns = feature_names(dataset)
    return [
        tuple(_to_float(record.values.get(c), row=i, column=c) for c in columns)
        for i, record in enumerate(dataset.records)
    ]
