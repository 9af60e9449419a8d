"""
Dataset loader / writer.

Datasets are local CSV files (header row required) or JSON files. We validate them
into typed Pydantic models so downstream scoring code can assume a consistent shape.

JSON input is either a full `Dataset` payload (`{"attributes": ..., "label": ..., "records": ...}`)
or a plain list of row objects, which is treated like CSV rows.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from clusterweight.core.env import resolve_project_path
from clusterweight.core.errors import DatasetError
from clusterweight.domain.models import Dataset, Record

# Weka treats the last column as the class attribute unless told otherwise.
LAST_COLUMN = "last"

_DATASET_ADAPTER = TypeAdapter(Dataset)


def _coerce(value: Any) -> float | str | None:
    # CSV cells keep their original text so a written file reproduces every
    # non-weight cell; only "" and "?" mean missing.
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    text = str(value)
    if text.strip() in {"", "?"}:
        return None
    return text


def _parse_weight(value: Any, *, row: int) -> float | None:
    raw = _coerce(value)
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        raise DatasetError(f"record {row}: weight {value!r} is not numeric") from None


def _resolve_label(columns: list[str], label: str | None) -> str | None:
    if label is None:
        return None
    if label in columns:
        return label
    if label == LAST_COLUMN:
        return columns[-1] if columns else None
    raise DatasetError(f"label column '{label}' not found; available: {columns}")


def dataset_from_rows(
    columns: list[str],
    rows: list[dict[str, Any]],
    *,
    label: str | None = LAST_COLUMN,
    weight_column: str | None = None,
    default_weight: float = 1.0,
) -> Dataset:
    """Build a `Dataset` from header + row dicts, optionally reading initial weights."""
    attributes = [c for c in columns if c != weight_column]
    resolved_label = _resolve_label(attributes, label)

    records: list[Record] = []
    for i, row in enumerate(rows):
        weight = default_weight
        if weight_column and weight_column in row:
            parsed = _parse_weight(row[weight_column], row=i)
            if parsed is not None:
                weight = parsed
        values = {c: _coerce(row.get(c)) for c in attributes}
        records.append(Record(values=values, weight=weight))
    return Dataset(attributes=attributes, label=resolved_label, records=records)


def _load_csv(path: Path, **kwargs: Any) -> Dataset:
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        columns = [c.strip() for c in (reader.fieldnames or [])]
        if not columns:
            raise DatasetError(f"{path} has no header row")
        rows = [{k.strip(): v for k, v in row.items() if k is not None} for row in reader]
    return dataset_from_rows(columns, rows, **kwargs)


def _load_json(path: Path, **kwargs: Any) -> Dataset:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        return _DATASET_ADAPTER.validate_python(payload)
    if isinstance(payload, list) and all(isinstance(row, dict) for row in payload):
        columns: list[str] = []
        for row in payload:
            for key in row:
                if key not in columns:
                    columns.append(key)
        return dataset_from_rows(columns, payload, **kwargs)
    raise DatasetError(f"{path}: expected a dataset object or a list of row objects")


def load_dataset(
    path: str | Path,
    *,
    label: str | None = LAST_COLUMN,
    weight_column: str | None = None,
    default_weight: float = 1.0,
) -> Dataset:
    """Load and validate a CSV or JSON dataset file."""
    resolved = resolve_project_path(path)
    kwargs = {"label": label, "weight_column": weight_column, "default_weight": default_weight}
    if resolved.suffix.lower() == ".json":
        return _load_json(resolved, **kwargs)
    return _load_csv(resolved, **kwargs)


def _format(value: float | str | None) -> str:
    if value is None:
        return "?"
    if isinstance(value, float):
        return repr(value)
    return value


def write_dataset(dataset: Dataset, path: str | Path, *, weight_column: str = "weight") -> Path:
    """Write a dataset (weights included) as CSV, or as JSON when the suffix is `.json`."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    if out.suffix.lower() == ".json":
        out.write_text(json.dumps(dataset.model_dump(mode="json"), ensure_ascii=False, indent=2), encoding="utf-8")
        return out

    if weight_column in dataset.attributes:
        raise DatasetError(f"weight column '{weight_column}' clashes with a dataset attribute")
    with out.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([*dataset.attributes, weight_column])
        for record in dataset.records:
            writer.writerow([*(_format(record.values.get(a)) for a in dataset.attributes), repr(record.weight)])
    return out
