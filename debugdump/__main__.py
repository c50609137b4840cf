"""Dump a render graph snapshot to a Graphviz DOT file.

Usage:
  python3 -m debugdump samples/core_pipeline.yaml --output render_graph.dot

Render with Graphviz:
  dot -Tsvg -O render_graph.dot
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .dot import DebugDumpError
from .graph import RenderGraph
from .render_graph import render_graph_dot
from .settings import RenderGraphSettings

_logger = logging.getLogger("debugdump")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="debugdump", description="Export a render graph snapshot to Graphviz DOT"
    )
    parser.add_argument("input", help="render graph snapshot (YAML)")
    parser.add_argument("--output", "-o", default=None,
                        help="output .dot file (default: write to stdout)")
    parser.add_argument("--settings", "-s", default=None,
                        help="YAML file with presentation settings")
    parser.add_argument("--sort", action="store_true",
                        help="order nodes by type name")
    parser.add_argument("--no-ids", action="store_true",
                        help="omit node UUIDs from the node titles")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    inp = Path(args.input)
    if not inp.is_file():
        print(f"Error: input file not found: {inp}", file=sys.stderr)
        return 2

    try:
        settings = RenderGraphSettings.from_yaml(args.settings) if args.settings else RenderGraphSettings()
        if args.sort:
            settings.sort_nodes = True
        if args.no_ids:
            settings.show_node_id = False
        graph = RenderGraph.from_yaml(inp)
        dot = render_graph_dot(graph, settings)
    except (DebugDumpError, ValueError, FileNotFoundError, yaml.YAMLError) as exc:
        _logger.error("could not dump %s: %s", inp, exc)
        return 1

    if args.output is None:
        sys.stdout.write(dot)
        return 0

    out = Path(args.output)
    # ensure output directory exists
    if not out.parent.exists():
        out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(dot, encoding="utf-8")
    print(f"Wrote {out} ({len(graph)} nodes, {graph.edge_count()} edges)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
