"""
Weka-style option strings.

The filter has always been driven by two flags:

    -F <Identity | Log | Sigmoid | Exp>     shaping function (default: Identity)
    -C <HighRelevance | LowRelevance>       closest centroid impact (default: HighRelevance)

`get_options` and `set_options` round-trip those flags so a run can be reproduced
from its logged command line. The older names `Identical` and `Logarithm` are
still accepted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from clusterweight.config.settings import Impact, RelevanceSettings, Shaping
from clusterweight.core.errors import ConfigurationError


@dataclass(frozen=True)
class OptionSpec:
    flag: str
    synopsis: str
    description: str
    default: str


def list_options() -> list[OptionSpec]:
    """Describe the supported flags."""
    return [
        OptionSpec(
            flag="F",
            synopsis="-F <" + " | ".join(s.value for s in Shaping) + ">",
            description="Function applied over the relevance values.",
            default=Shaping.IDENTITY.value,
        ),
        OptionSpec(
            flag="C",
            synopsis="-C <" + " | ".join(i.value for i in Impact) + ">",
            description="How the distance to the closest centroid contributes to the relevance computation.",
            default=Impact.HIGH_RELEVANCE.value,
        ),
    ]


def get_options(relevance: RelevanceSettings) -> list[str]:
    """Return the current settings as an option list suitable for `set_options`."""
    return ["-F", relevance.shaping.value, "-C", relevance.impact.value]


def _pop_option(flag: str, options: list[str]) -> str | None:
    key = f"-{flag}"
    if key not in options:
        return None
    i = options.index(key)
    if i + 1 >= len(options):
        raise ConfigurationError(f"No value given for {key} option.")
    value = options[i + 1]
    del options[i : i + 2]
    return value


def set_options(options: list[str]) -> dict[str, Any]:
    """Parse `-F` / `-C` into a `relevance` overrides mapping.

    Raises `ConfigurationError` for unknown values or leftover options.
    """
    remaining = list(options)
    relevance: dict[str, Any] = {}

    shaping = _pop_option("F", remaining)
    if shaping:
        relevance["shaping"] = Shaping.parse(shaping)

    impact = _pop_option("C", remaining)
    if impact:
        relevance["impact"] = Impact.parse(impact)

    leftovers = [o for o in remaining if o.strip()]
    if leftovers:
        raise ConfigurationError(f"Illegal options: {' '.join(leftovers)}")
    return {"relevance": relevance} if relevance else {}
