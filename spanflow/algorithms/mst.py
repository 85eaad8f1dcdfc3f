"""Minimum spanning tree over the out-reachable part of a graph (Prim)."""

from __future__ import annotations

from heapq import heappop, heappush
from itertools import count
from typing import Iterable, Iterator, List, NamedTuple, Optional, Set, Tuple

from spanflow.graph import Graph, NodeHandle, NodeID, Registry
from spanflow.logging import get_logger

logger = get_logger(__name__)

# (weight, push sequence, tail handle, head handle)
FrontierEntry = Tuple[float, int, NodeHandle, NodeHandle]


class TreeEdge(NamedTuple):
    """One spanning-tree edge in external ids; weight is the edge capacity."""

    from_id: NodeID
    to_id: NodeID
    weight: float


def _push_frontier(
    registry: Registry,
    node: NodeHandle,
    visited: Set[NodeHandle],
    frontier: List[FrontierEntry],
    seq: Iterator[int],
) -> None:
    for target, _, attrs in registry.out_edge_items(node):
        if target not in visited:
            heappush(frontier, (attrs["capacity"], next(seq), node, target))


def minimum_spanning_tree(
    graph: Graph, start_id: Optional[NodeID] = None
) -> List[TreeEdge]:
    """Build a minimum spanning tree with Prim's algorithm.

    Traversal follows outgoing edges only. On a directed, asymmetric graph the
    result spans just the nodes reachable from the start node, not the whole
    vertex set. To get the usual undirected behaviour insert every edge in both
    directions with the same capacity.

    Edges are emitted in the order their head node joins the tree. Among
    frontier edges of equal weight the one pushed first wins; callers should
    not rely on which of several equal-weight edges is chosen.

    Args:
        graph: Graph to span. It is read, never modified.
        start_id: External id of the root. Defaults to the first inserted node.

    Returns:
        List of ``TreeEdge(from_id, to_id, weight)``. Empty for an empty graph
        or a root with no out-reachable neighbours.

    Raises:
        UnknownNodeError: If ``start_id`` is given but not registered.
    """
    registry = graph.registry
    if start_id is not None:
        start = graph.handle_of(start_id)
    elif len(registry) == 0:
        return []
    else:
        start = next(iter(registry))

    to_id = graph.index.to_id
    seq = count()
    visited: Set[NodeHandle] = {start}
    frontier: List[FrontierEntry] = []
    tree: List[TreeEdge] = []

    _push_frontier(registry, start, visited, frontier, seq)

    while frontier:
        weight, _, tail, head = heappop(frontier)
        if head in visited:
            # Stale entry: head joined the tree through a cheaper edge
            continue

        visited.add(head)
        tree.append(TreeEdge(to_id[tail], to_id[head], weight))
        _push_frontier(registry, head, visited, frontier, seq)

    logger.debug(
        "MST from node %s: %d edges spanning %d of %d nodes",
        to_id[start],
        len(tree),
        len(visited),
        len(registry),
    )
    return tree


def tree_weight(edges: Iterable[TreeEdge]) -> float:
    """Total weight of a spanning tree."""
    return float(sum(edge.weight for edge in edges))
