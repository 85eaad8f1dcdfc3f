"""Graph documents: load graphs from YAML/JSON and dump them back to dicts.

Document shape::

    nodes:
      - {id: 1, value: 0.5, pos: [0.0, 1.0]}
      - {id: 2}
    edges:
      - {source: 1, target: 2, capacity: 3.0}
      - {source: 2, target: 3, capacity: 1.0, bidirectional: true}

``value`` and ``pos`` are optional on nodes; ``capacity`` defaults to
``ENGINE_CONFIG.default_capacity``; ``bidirectional`` inserts both directions.
"""

from __future__ import annotations

import json
from numbers import Real
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from spanflow.config import ENGINE_CONFIG
from spanflow.graph import Graph
from spanflow.logging import get_logger

logger = get_logger(__name__)

_NODE_KEYS = {"id", "value", "pos"}
_EDGE_KEYS = {"source", "target", "capacity", "bidirectional"}


def _check_keys(entry: Dict[str, Any], allowed: set, what: str) -> None:
    extra = set(entry.keys()) - allowed
    if extra:
        raise ValueError(
            f"Unrecognized key(s) in {what}: {', '.join(sorted(map(str, extra)))}. "
            f"Allowed keys are {sorted(allowed)}"
        )


def _is_real(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def graph_from_dict(data: Dict[str, Any]) -> Graph:
    """Build a graph from an already-parsed document.

    Raises:
        ValueError: On a malformed document. ``UnknownNodeError`` and
            ``GraphValidationError`` from the graph itself pass through.
    """
    if not isinstance(data, dict):
        raise ValueError("The graph document must map to a dictionary at top-level.")
    _check_keys(data, {"nodes", "edges"}, "graph document")

    nodes = data.get("nodes") or []
    edges = data.get("edges") or []
    if not isinstance(nodes, list):
        raise ValueError("'nodes' must be a list")
    if not isinstance(edges, list):
        raise ValueError("'edges' must be a list")

    graph = Graph()
    for i, entry in enumerate(nodes):
        if not isinstance(entry, dict) or "id" not in entry:
            raise ValueError(f"Node entry #{i} must be a mapping with an 'id'")
        _check_keys(entry, _NODE_KEYS, f"node entry #{i}")
        pos = entry.get("pos", (0.0, 0.0))
        if not isinstance(pos, (list, tuple)) or len(pos) != 2:
            raise ValueError(f"Node entry #{i}: 'pos' must be a pair [x, y]")
        if not all(_is_real(c) for c in pos):
            raise ValueError(
                f"Node entry #{i}: 'pos' items must be numbers, got {pos!r}"
            )
        value = entry.get("value", 0.0)
        if not _is_real(value):
            raise ValueError(
                f"Node entry #{i}: 'value' must be a number, got {value!r}"
            )
        graph.insert_node(entry["id"], value=value, x=pos[0], y=pos[1])

    for i, entry in enumerate(edges):
        if not isinstance(entry, dict):
            raise ValueError(f"Edge entry #{i} must be a mapping")
        if "source" not in entry or "target" not in entry:
            raise ValueError(f"Edge entry #{i} must include 'source' and 'target'")
        _check_keys(entry, _EDGE_KEYS, f"edge entry #{i}")
        capacity = entry.get("capacity", ENGINE_CONFIG.default_capacity)
        bidirectional = entry.get("bidirectional", False)
        if not isinstance(bidirectional, bool):
            raise ValueError(
                f"Edge entry #{i}: 'bidirectional' must be true or false, "
                f"got {bidirectional!r}"
            )
        if bidirectional:
            graph.insert_undirected_edge(entry["source"], entry["target"], capacity)
        else:
            graph.insert_edge(entry["source"], entry["target"], capacity)

    logger.debug(
        "Loaded graph with %d nodes and %d edges", len(graph), graph.number_of_edges()
    )
    return graph


def load_graph_yaml(yaml_str: str) -> Graph:
    """Parse a YAML (or JSON, which is valid YAML) document into a graph."""
    data = yaml.safe_load(yaml_str)
    if data is None:
        data = {}
    return graph_from_dict(data)


def load_graph(path: Union[str, Path]) -> Graph:
    """Load a graph document from disk; ``.json`` files use the JSON parser."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return graph_from_dict(json.loads(text))
    return load_graph_yaml(text)


def graph_to_dict(
    graph: Graph, include_flow: bool = False
) -> Dict[str, List[Dict[str, Any]]]:
    """Serialize a graph to the document shape, one entry per directed edge.

    With ``include_flow`` each edge also carries its current ``flow``; such
    output is a report and is not accepted back by the loader.
    """
    nodes = [
        {"id": node.id, "value": node.value, "pos": list(node.position)}
        for node in graph.nodes()
    ]
    edges = []
    for edge in graph.edges():
        entry: Dict[str, Any] = {
            "source": edge.from_id,
            "target": edge.to_id,
            "capacity": edge.capacity,
        }
        if include_flow:
            entry["flow"] = edge.flow
        edges.append(entry)
    return {"nodes": nodes, "edges": edges}
