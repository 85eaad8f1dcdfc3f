"""Functional entry points mirroring the ``Graph`` methods.

These wrappers exist for callers that prefer free functions over methods:

    >>> g = create_graph()
    >>> for node_id in (1, 2, 3, 4):
    ...     _ = insert_node(g, node_id, 0.0, 0.0, 0.0)
    >>> for u, v, cap in [(1, 2, 3), (1, 3, 2), (2, 4, 2), (3, 4, 3)]:
    ...     _ = insert_edge(g, u, v, cap)
    >>> compute_max_flow(g, 1, 4)
    4.0
"""

from __future__ import annotations

from typing import List

from spanflow.algorithms.max_flow import calc_max_flow
from spanflow.algorithms.mst import TreeEdge, minimum_spanning_tree
from spanflow.graph import EdgeKey, Graph, NodeHandle, NodeID


def create_graph() -> Graph:
    """Return a new, empty graph."""
    return Graph()


def insert_node(
    graph: Graph, node_id: NodeID, value: float, x: float, y: float
) -> NodeHandle:
    """Register a node; raises ``GraphValidationError`` on a duplicate id."""
    return graph.insert_node(node_id, value, x, y)


def insert_edge(
    graph: Graph, from_id: NodeID, to_id: NodeID, capacity: float
) -> EdgeKey:
    """Add a directed edge; raises ``UnknownNodeError`` for unregistered ids."""
    return graph.insert_edge(from_id, to_id, capacity)


def compute_mst(graph: Graph) -> List[TreeEdge]:
    """Prim's tree rooted at the first inserted node."""
    return minimum_spanning_tree(graph)


def compute_max_flow(graph: Graph, source_id: NodeID, sink_id: NodeID) -> float:
    """Edmonds-Karp max flow; leaves the flow assignment on ``graph``."""
    return calc_max_flow(graph, source_id, sink_id)
