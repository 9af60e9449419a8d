"""
Per-run settings overrides.

A scoring run can adjust a few knobs without touching YAML: the HTTP API sends a
`settings_overrides` mapping, the CLI builds one from its flags, and Weka-style
`-F` / `-C` option strings are folded in through `options.set_options`.

Only whitelisted sections and fields may change. The result is always a freshly
validated `Settings`; the cached base settings are never mutated.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from clusterweight.config.options import set_options
from clusterweight.config.settings import Settings
from clusterweight.core.errors import ConfigurationError

# Section name -> overridable field names (None means every field of the section).
# `clustering.min_clusters` stays fixed: X-means must always be allowed to split.
OVERRIDABLE_FIELDS: dict[str, frozenset[str] | None] = {
    "relevance": None,
    "clustering": frozenset({"max_clusters", "max_iterations", "random_state"}),
}


def _check_overrides(overrides: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
    checked: dict[str, dict[str, Any]] = {}
    for section, fields in overrides.items():
        if section not in OVERRIDABLE_FIELDS:
            raise ConfigurationError(f"settings_overrides contains a disallowed key: '{section}'")
        if not isinstance(fields, Mapping):
            raise ConfigurationError(f"settings_overrides key '{section}' must be a mapping")
        allowed = OVERRIDABLE_FIELDS[section]
        for name in fields:
            if allowed is not None and name not in allowed:
                raise ConfigurationError(f"settings_overrides contains a disallowed key: '{section}.{name}'")
        checked[section] = dict(fields)
    return checked


def apply_settings_overrides(
    settings: Settings,
    overrides: Mapping[str, Any] | None = None,
    *,
    options: Sequence[str] | None = None,
) -> Settings:
    """Return `settings` with option strings, then `overrides`, laid on top.

    Raises `ConfigurationError` for disallowed keys, unknown option values and
    any value the `Settings` model rejects.
    """
    layers = [_check_overrides(set_options(list(options or []))), _check_overrides(overrides or {})]
    if not any(layers):
        return settings

    payload = settings.model_dump(mode="python")
    for layer in layers:
        for section, fields in layer.items():
            payload[section] = {**payload.get(section, {}), **fields}
    try:
        return Settings.model_validate(payload)
    except ValidationError as e:
        raise ConfigurationError(f"invalid settings_overrides: {e}") from e
