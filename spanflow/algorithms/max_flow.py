"""Maximum flow by shortest augmenting paths (Edmonds-Karp), forward edges only."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Set, Tuple, Union, overload

from spanflow.config import ENGINE_CONFIG, EngineConfig
from spanflow.graph import EdgeKey, Graph, NodeHandle, NodeID, Registry
from spanflow.logging import get_logger

logger = get_logger(__name__)

# Edge identifier in external ids: (from_id, to_id, edge_key)
CutEdge = Tuple[NodeID, NodeID, EdgeKey]


@dataclass(frozen=True)
class FlowSummary:
    """Summary of a max-flow computation.

    Attributes:
        total_flow: Flow value returned by the solver.
        edge_flow: Flow on each edge after the solve, by edge key.
        residual_cap: ``capacity - flow`` on each edge, by edge key.
        reachable: External ids reachable from the source over forward edges
            that still have residual capacity.
        min_cut: Saturated edges leaving the reachable set.
        augmentations: Number of augmenting paths pushed by this call.
    """

    total_flow: float
    edge_flow: Dict[EdgeKey, float]
    residual_cap: Dict[EdgeKey, float]
    reachable: Set[NodeID]
    min_cut: List[CutEdge]
    augmentations: int


def find_augmenting_path(
    registry: Registry,
    source: NodeHandle,
    sink: NodeHandle,
    config: EngineConfig = ENGINE_CONFIG,
) -> Optional[List[EdgeKey]]:
    """
    Breadth-first search for a fewest-hops path with positive residual capacity.

    Only edges as inserted are followed; there are no reverse residual edges.
    The search stops as soon as the sink is labelled.

    Args:
        registry: Registry holding capacities and current flows.
        source: Source handle.
        sink: Sink handle. Must differ from ``source``.
        config: Supplies the residual threshold.

    Returns:
        Edge keys from source to sink in path order, or None if the sink is
        unreachable.
    """
    pred: Dict[NodeHandle, EdgeKey] = {}
    visited = {source}
    queue = deque([source])

    while queue:
        node = queue.popleft()
        for target, key, attrs in registry.out_edge_items(node):
            if target in visited:
                continue
            if not config.is_traversable(attrs["capacity"], attrs["flow"]):
                continue
            visited.add(target)
            pred[target] = key
            if target == sink:
                return _trace_path(registry, pred, source, sink)
            queue.append(target)

    return None


def _trace_path(
    registry: Registry,
    pred: Dict[NodeHandle, EdgeKey],
    source: NodeHandle,
    sink: NodeHandle,
) -> List[EdgeKey]:
    edges = registry.get_edges()
    path: List[EdgeKey] = []
    node = sink
    while node != source:
        key = pred[node]
        path.append(key)
        node = edges[key][0]
    path.reverse()
    return path


def _augment(registry: Registry, path: List[EdgeKey]) -> float:
    """Push the bottleneck amount along ``path`` and return it."""
    attrs_on_path = [registry.get_edge_attr(key) for key in path]
    bottleneck = min(attrs["capacity"] - attrs["flow"] for attrs in attrs_on_path)
    for attrs in attrs_on_path:
        # Clamp so float rounding never leaves flow above capacity
        attrs["flow"] = min(attrs["capacity"], attrs["flow"] + bottleneck)
    return bottleneck


@overload
def calc_max_flow(
    graph: Graph,
    source_id: NodeID,
    sink_id: NodeID,
    *,
    reset_flow: bool = False,
    return_summary: Literal[False] = False,
    config: Optional[EngineConfig] = None,
) -> float: ...


@overload
def calc_max_flow(
    graph: Graph,
    source_id: NodeID,
    sink_id: NodeID,
    *,
    reset_flow: bool = False,
    return_summary: Literal[True],
    config: Optional[EngineConfig] = None,
) -> Tuple[float, FlowSummary]: ...


def calc_max_flow(
    graph: Graph,
    source_id: NodeID,
    sink_id: NodeID,
    *,
    reset_flow: bool = False,
    return_summary: bool = False,
    config: Optional[EngineConfig] = None,
) -> Union[float, Tuple[float, FlowSummary]]:
    """Compute the maximum flow from ``source_id`` to ``sink_id`` in place.

    Repeats until no path is left:
      1. Find a fewest-hops path over edges with positive residual capacity.
      2. Take the smallest residual on it (the bottleneck).
      3. Add the bottleneck to the flow of every edge on the path.

    Flow is pushed along inserted edges only. No reverse residual edges are
    created, so flow already assigned is never cancelled. The result is the
    true maximum flow for networks where no augmenting path would need to undo
    earlier flow (for example, layered DAGs); on other graphs it can be lower.

    Edge ``flow`` attributes of ``graph`` hold the final assignment. Existing
    flow is respected unless ``reset_flow`` is set, so calling twice on the
    same graph returns 0.0 the second time.

    Args:
        graph: Graph to solve. Mutated in place.
        source_id: External id of the source.
        sink_id: External id of the sink.
        reset_flow: If True, zero every edge flow before solving. Ignored
            when source and sink are the same node.
        return_summary: If True, also return a ``FlowSummary``.
        config: Engine thresholds; defaults to ``ENGINE_CONFIG``.

    Returns:
        The flow pushed by this call, or ``(flow, FlowSummary)`` when
        ``return_summary`` is True.

    Raises:
        UnknownNodeError: If the source or sink is not registered. Nothing is
            mutated in that case.

    Examples:
        >>> g = Graph()
        >>> for i in (1, 2, 3):
        ...     _ = g.insert_node(i)
        >>> _ = g.insert_edge(1, 2, 10.0)
        >>> _ = g.insert_edge(2, 3, 5.0)
        >>> calc_max_flow(g, 1, 3)
        5.0
    """
    cfg = config or ENGINE_CONFIG
    source = graph.handle_of(source_id)
    sink = graph.handle_of(sink_id)

    registry = graph.registry
    total = 0.0
    augmentations = 0

    # Degenerate case (s == t): conservation forces the net surplus to zero
    # and the graph, flows included, is left as it is.
    if source != sink:
        if reset_flow:
            graph.reset_flow()
        while True:
            path = find_augmenting_path(registry, source, sink, cfg)
            if path is None:
                break
            pushed = _augment(registry, path)
            total += pushed
            augmentations += 1
            logger.debug(
                "Augmenting path %d: %d edges, bottleneck %s",
                augmentations,
                len(path),
                pushed,
            )

    logger.debug(
        "Max flow %s -> %s: %s over %d augmenting paths",
        source_id,
        sink_id,
        total,
        augmentations,
    )

    if not return_summary:
        return total
    return total, _build_flow_summary(graph, source, total, augmentations, cfg)


def _build_flow_summary(
    graph: Graph,
    source: NodeHandle,
    total_flow: float,
    augmentations: int,
    config: EngineConfig,
) -> FlowSummary:
    registry = graph.registry
    to_id = graph.index.to_id
    edges = registry.get_edges()

    edge_flow = {key: attrs["flow"] for key, (_, _, _, attrs) in edges.items()}
    residual_cap = {
        key: attrs["capacity"] - attrs["flow"]
        for key, (_, _, _, attrs) in edges.items()
    }

    reachable: Set[NodeHandle] = set()
    stack = [source]
    while stack:
        node = stack.pop()
        if node in reachable:
            continue
        reachable.add(node)
        for target, _, attrs in registry.out_edge_items(node):
            if target not in reachable and config.is_traversable(
                attrs["capacity"], attrs["flow"]
            ):
                stack.append(target)

    min_cut = [
        (to_id[u], to_id[v], key)
        for u, v, key, attrs in edges.values()
        if u in reachable
        and v not in reachable
        and config.is_saturated(attrs["capacity"], attrs["flow"])
    ]

    return FlowSummary(
        total_flow=total_flow,
        edge_flow=edge_flow,
        residual_cap=residual_cap,
        reachable={to_id[h] for h in reachable},
        min_cut=min_cut,
        augmentations=augmentations,
    )


def node_imbalance(graph: Graph) -> Dict[NodeID, float]:
    """Outgoing minus incoming flow for every node.

    After a solve this is zero everywhere except at the source (positive)
    and the sink (negative).
    """
    to_id = graph.index.to_id
    balance: Dict[NodeID, float] = {to_id[h]: 0.0 for h in graph.registry}
    for u, v, _, attrs in graph.registry.get_edges().values():
        balance[to_id[u]] += attrs["flow"]
        balance[to_id[v]] -= attrs["flow"]
    return balance
