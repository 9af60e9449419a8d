"""
Small formatting helpers.

Used by the CLI to print compact summaries of scoring results.
"""

from __future__ import annotations

from clusterweight.domain.models import ScoringResult


def one_line_summary(result: ScoringResult) -> str:
    """Render a compact single-line summary for a scoring result."""
    if result.skipped:
        return f"records={len(result.weights)} skipped (nothing to cluster)"
    parts = [
        f"records={len(result.weights)}",
        f"clusters={result.n_clusters}",
        f"impact={result.impact.value}",
        f"shaping={result.shaping.value}",
        f"min={min(result.weights):.4f}",
        f"max={max(result.weights):.4f}",
    ]
    if result.shift:
        parts.append(f"shift={result.shift:.4f}")
    return " | ".join(parts)
