from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from erd_autolayout.editor import layout_editor_graph
from erd_autolayout.types import LayoutOptions, LayoutStrategy

logger = logging.getLogger(__name__)

STRATEGY_CHOICES = ("auto", "circular", "hierarchical", "grid", "force", "layered")


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Auto-layout an entity-relationship diagram exported by the editor"
    )
    parser.add_argument("path", help="Path to a JSON document with 'nodes' and 'edges'")
    parser.add_argument(
        "-o",
        "--output",
        help="Where to write the laid out document (default: stdout)",
    )
    parser.add_argument(
        "--strategy",
        choices=STRATEGY_CHOICES,
        default="auto",
        help="Placement strategy; 'force' and 'layered' are only used when asked for",
    )
    parser.add_argument(
        "--no-overlap-pass",
        action="store_true",
        help="Skip the overlap relaxation pass after placement",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the force strategy (default: random)",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=50,
        help="Iteration budget for the force strategy (default: 50)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    path = Path(args.path)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        parser.error(f"cannot read diagram {path}: {exc}")
    if not isinstance(document, dict):
        parser.error(f"diagram {path} must be a JSON object")

    options = LayoutOptions(force_seed=args.seed, force_iterations=args.iterations)
    strategy: LayoutStrategy | None = None if args.strategy == "auto" else args.strategy

    nodes = document.get("nodes") or []
    edges = document.get("edges") or []
    if not isinstance(nodes, list) or not isinstance(edges, list):
        parser.error(f"diagram {path}: 'nodes' and 'edges' must be lists")
    logger.info("laying out %d nodes and %d edges from %s", len(nodes), len(edges), path)
    document["nodes"] = layout_editor_graph(
        nodes,
        edges,
        options=options,
        strategy=strategy,
        overlap_pass=not args.no_overlap_pass,
    )

    text = json.dumps(document, indent=2, ensure_ascii=False)
    if args.output:
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
        logger.info("wrote %s", out_path)
    else:
        sys.stdout.write(text + "\n")


if __name__ == "__main__":
    main()
