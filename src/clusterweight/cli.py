"""
ClusterWeight CLI entrypoint.

This CLI is intended for scoring dataset files locally and for checking option strings.
It delegates all scoring logic to `clusterweight.scoring.scorer.RelevanceScorer`.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from clusterweight.config.options import get_options, list_options
from clusterweight.config.overrides import apply_settings_overrides
from clusterweight.config.settings import Settings, get_settings
from clusterweight.core.errors import ClusterWeightError
from clusterweight.core.logging import configure_logging
from clusterweight.dataset.loader import LAST_COLUMN, load_dataset, write_dataset
from clusterweight.scoring.explain import one_line_summary
from clusterweight.scoring.scorer import RelevanceScorer, apply_weights


def _option_argv(args: argparse.Namespace) -> list[str]:
    argv: list[str] = []
    if args.shaping:
        argv += ["-F", args.shaping]
    if args.impact:
        argv += ["-C", args.impact]
    return argv


def _settings_for(args: argparse.Namespace) -> Settings:
    overrides: dict[str, Any] = {}
    if getattr(args, "max_clusters", None) is not None:
        overrides["clustering"] = {"max_clusters": int(args.max_clusters)}
    return apply_settings_overrides(get_settings(), overrides, options=_option_argv(args))


def _cmd_score(args: argparse.Namespace) -> int:
    """Handle the `score` subcommand."""
    settings = _settings_for(args)
    label = None if args.no_label else (args.label or LAST_COLUMN)
    weight_column = args.weight_column or settings.dataset.weight_column

    dataset = load_dataset(
        args.input,
        label=label,
        weight_column=weight_column,
        default_weight=settings.dataset.default_weight,
    )
    result = RelevanceScorer(settings).score(dataset)
    apply_weights(dataset, result)

    if args.output:
        write_dataset(dataset, args.output, weight_column=weight_column)

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    print(f"Options: {' '.join(get_options(settings.relevance))}")
    print(one_line_summary(result))
    if args.output:
        print(f"Wrote: {args.output}")
    return 0


def _cmd_options(args: argparse.Namespace) -> int:
    settings = _settings_for(args)
    print(" ".join(get_options(settings.relevance)))
    if args.verbose:
        for opt in list_options():
            print(f"  {opt.synopsis}\n\t{opt.description}\n\t(default: {opt.default})")
    return 0


def _add_option_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("-F", "--shaping", type=str, default=None, help="Identity | Log | Sigmoid | Exp")
    p.add_argument("-C", "--impact", type=str, default=None, help="HighRelevance | LowRelevance")


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ClusterWeight CLI."""
    parser = argparse.ArgumentParser(prog="clusterweight")
    parser.add_argument("--log-level", type=str, default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    sc = sub.add_parser("score", help="Compute clustering-based relevance weights for a CSV/JSON dataset.")
    sc.add_argument("input", help="Dataset file (.csv with header row, or .json)")
    sc.add_argument("-o", "--output", type=str, default=None, help="Write the weighted dataset here (.csv or .json)")
    sc.add_argument("--label", type=str, default=None, help="Class column to ignore (default: last column)")
    sc.add_argument("--no-label", action="store_true", help="The dataset has no class column")
    sc.add_argument("--weight-column", type=str, default=None, help="Column holding/receiving weights")
    sc.add_argument("--max-clusters", type=int, default=None)
    sc.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    _add_option_flags(sc)
    sc.set_defaults(func=_cmd_score)

    op = sub.add_parser("options", help="Print the effective option string.")
    _add_option_flags(op)
    op.add_argument("-v", "--verbose", action="store_true", help="Also describe every option")
    op.set_defaults(func=_cmd_options)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m clusterweight.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except ClusterWeightError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
