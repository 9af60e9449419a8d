# src/clusterweight/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/clusterweight/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `CLUSTERWEIGHT_CONFIG_PATH`
- environment variables (e.g., `CLUSTERWEIGHT_IMPACT`, `CLUSTERWEIGHT_SHAPING`)

Design rule:
- Tuning knobs live in YAML, not hard-coded in business logic.
"""

from __future__ import annotations

import os
from enum import Enum
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any
from clusterweight.core.env import load_dotenv_if_present
from clusterweight.core.errors import UnknownModifier, UnknownStrategy

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

# Added to the minimum centroid distance so a record sitting on a centroid never divides by zero.
EPSILON = 1e-3

MIN_CLUSTERS = 2
MAX_CLUSTERS = 1000
MAX_ITERATIONS = 1000


class Impact(str, Enum):
    """How the distance to the closest centroid maps to raw relevance."""

    HIGH_RELEVANCE = "HighRelevance"
    LOW_RELEVANCE = "LowRelevance"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str | Impact) -> Impact:
        """Resolve a case-insensitive name; raises `UnknownStrategy` otherwise."""
        if isinstance(text, cls):
            return text
        key = str(text).strip().lower()
        for member in cls:
            if key in {member.value.lower(), member.name.lower()}:
                return member
        raise UnknownStrategy(f"Unknown impact type: {text}")


# Older Weka option names, still accepted on input.
_SHAPING_ALIASES = {"identical": "Identity", "logarithm": "Log"}


class Shaping(str, Enum):
    """Function applied to every raw relevance value before it becomes a weight."""

    IDENTITY = "Identity"
    LOG = "Log"
    SIGMOID = "Sigmoid"
    EXP = "Exp"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str | Shaping) -> Shaping:
        """Resolve a case-insensitive name or alias; raises `UnknownModifier` otherwise."""
        if isinstance(text, cls):
            return text
        key = str(text).strip().lower()
        key = _SHAPING_ALIASES.get(key, key).lower()
        for member in cls:
            if key == member.value.lower():
                return member
        raise UnknownModifier(f"Unknown function type: {text}")


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `clusterweight.config`."""
    text = resources.files("clusterweight.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "ClusterWeight"
    log_level: str = "INFO"


class RelevanceSettings(BaseModel):
    impact: Impact = Impact.HIGH_RELEVANCE
    shaping: Shaping = Shaping.IDENTITY
    epsilon: float = Field(EPSILON, gt=0)

    @field_validator("impact", mode="before")
    @classmethod
    def _parse_impact(cls, value: Any) -> Impact:
        return Impact.parse(value)

    @field_validator("shaping", mode="before")
    @classmethod
    def _parse_shaping(cls, value: Any) -> Shaping:
        return Shaping.parse(value)


class ClusteringSettings(BaseModel):
    min_clusters: int = Field(MIN_CLUSTERS, ge=2)
    max_clusters: int = Field(MAX_CLUSTERS, ge=2)
    max_iterations: int = Field(MAX_ITERATIONS, ge=1)
    random_state: int | None = 0

    @model_validator(mode="after")
    def _validate_bounds(self) -> "ClusteringSettings":
        if self.max_clusters < self.min_clusters:
            raise ValueError("clustering.max_clusters must be >= clustering.min_clusters")
        return self


class DatasetSettings(BaseModel):
    weight_column: str = "weight"
    default_weight: float = 1.0


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    relevance: RelevanceSettings = Field(default_factory=RelevanceSettings)
    clustering: ClusteringSettings = Field(default_factory=ClusteringSettings)
    dataset: DatasetSettings = Field(default_factory=DatasetSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small; everything else belongs in YAML.
    """
    load_dotenv_if_present()
    data = dict(data)
    log_level = os.getenv("CLUSTERWEIGHT_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    impact = os.getenv("CLUSTERWEIGHT_IMPACT")
    if impact:
        data.setdefault("relevance", {})["impact"] = impact

    shaping = os.getenv("CLUSTERWEIGHT_SHAPING")
    if shaping:
        data.setdefault("relevance", {})["shaping"] = shaping

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("CLUSTERWEIGHT_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
