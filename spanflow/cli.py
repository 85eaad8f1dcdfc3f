"""Command-line interface for spanflow."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, Dict, List, Optional

import yaml

from spanflow.algorithms.max_flow import calc_max_flow
from spanflow.algorithms.mst import minimum_spanning_tree, tree_weight
from spanflow.graph import Graph
from spanflow.io import graph_to_dict, load_graph
from spanflow.logging import get_logger, level_for_flags, set_global_log_level

logger = get_logger(__name__)

# Errors that a bad graph file or bad node ids can produce
_USER_ERRORS = (ValueError, LookupError, yaml.YAMLError)


def _format_duration(seconds: float) -> str:
    if seconds < 1.0:
        return f"{seconds * 1000:.1f} ms"
    return f"{seconds:.2f} s"


def _emit(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _load(path: Path) -> Graph:
    start = perf_counter()
    graph = load_graph(path)
    logger.info(
        f"Loaded {path}: {len(graph)} nodes, {graph.number_of_edges()} edges "
        f"in {_format_duration(perf_counter() - start)}"
    )
    return graph


def _run_mst(path: Path, start_id: Optional[int]) -> Dict[str, Any]:
    graph = _load(path)
    tree = minimum_spanning_tree(graph, start_id)
    # A tree with k edges spans k + 1 nodes
    reached = len(tree) + 1
    if len(graph) and reached < len(graph):
        logger.warning(
            f"Spanning tree reaches {reached} of {len(graph)} nodes; "
            "the rest are not reachable over outgoing edges"
        )
    return {
        "command": "mst",
        "graph": str(path),
        "total_weight": tree_weight(tree),
        "edges": [edge._asdict() for edge in tree],
    }


def _run_max_flow(
    path: Path, source_id: int, sink_id: int, summary: bool
) -> Dict[str, Any]:
    graph = _load(path)
    result: Dict[str, Any] = {
        "command": "maxflow",
        "graph": str(path),
        "source": source_id,
        "sink": sink_id,
    }
    if summary:
        total, flow_summary = calc_max_flow(
            graph, source_id, sink_id, return_summary=True
        )
        result["augmentations"] = flow_summary.augmentations
        result["reachable"] = sorted(flow_summary.reachable)
        result["min_cut"] = [list(edge) for edge in flow_summary.min_cut]
    else:
        total = calc_max_flow(graph, source_id, sink_id)
    result["max_flow"] = total
    result["edges"] = graph_to_dict(graph, include_flow=True)["edges"]
    return result


def _run_inspect(path: Path) -> Dict[str, Any]:
    graph = _load(path)
    out_degree: Dict[int, int] = {node.id: 0 for node in graph.nodes()}
    for edge in graph.edges():
        out_degree[edge.from_id] += 1
    return {
        "command": "inspect",
        "graph": str(path),
        "nodes": len(graph),
        "edges": graph.number_of_edges(),
        "total_capacity": sum(edge.capacity for edge in graph.edges()),
        "no_outgoing": sorted(n for n, deg in out_degree.items() if deg == 0),
    }


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``spanflow`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="spanflow",
        description="Compute minimum spanning trees and maximum flows on graph files.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{mst,maxflow,inspect}",
        help="Available commands",
    )

    mst_parser = subparsers.add_parser("mst", help="Minimum spanning tree (Prim)")
    mst_parser.add_argument("graph", type=Path, help="Path to graph YAML/JSON")
    mst_parser.add_argument(
        "--start", type=int, default=None, help="Root node id (default: first node)"
    )

    flow_parser = subparsers.add_parser(
        "maxflow", help="Maximum flow (Edmonds-Karp, forward edges only)"
    )
    flow_parser.add_argument("graph", type=Path, help="Path to graph YAML/JSON")
    flow_parser.add_argument("--source", "-s", type=int, required=True)
    flow_parser.add_argument("--sink", "-t", type=int, required=True)
    flow_parser.add_argument(
        "--summary",
        action="store_true",
        help="Include reachable set, min cut and augmentation count",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Validate and describe a graph"
    )
    inspect_parser.add_argument("graph", type=Path, help="Path to graph YAML/JSON")

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    set_global_log_level(level_for_flags(args.verbose, args.quiet))
    logger.debug("Debug logging enabled")

    try:
        if args.command == "mst":
            payload = _run_mst(args.graph, args.start)
        elif args.command == "maxflow":
            payload = _run_max_flow(args.graph, args.source, args.sink, args.summary)
        else:
            payload = _run_inspect(args.graph)
    except FileNotFoundError:
        logger.error(f"Graph file not found: {args.graph}")
        sys.exit(1)
    except _USER_ERRORS as e:
        logger.error(f"Failed to run {args.command}: {type(e).__name__}: {e}")
        sys.exit(1)

    _emit(payload)


if __name__ == "__main__":
    main()
