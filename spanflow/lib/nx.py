"""NetworkX graph conversion utilities.

Example:
    >>> import networkx as nx
    >>> from spanflow.lib.nx import from_networkx, to_networkx
    >>>
    >>> G = nx.Graph()
    >>> G.add_edge(1, 2, capacity=1.0)
    >>> G.add_edge(2, 3, capacity=2.0)
    >>>
    >>> graph, edge_map = from_networkx(G)  # undirected -> both directions
    >>> graph.number_of_edges()
    4
    >>>
    >>> G_out = to_networkx(graph)  # MultiDiGraph keyed by external ids
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

import networkx as nx

from spanflow.config import ENGINE_CONFIG
from spanflow.graph import EdgeKey, Graph

NxGraph = Union[nx.DiGraph, nx.MultiDiGraph, nx.Graph, nx.MultiGraph]

# Type alias for edge references: (source_node, target_node, edge_key)
EdgeRef = Tuple[Any, Any, Any]


@dataclass
class EdgeMap:
    """Mapping between spanflow edge keys and the NetworkX edges they came from.

    Attributes:
        to_ref: Maps a spanflow edge key to the original (u, v, key) tuple.
        from_ref: Maps an original (u, v, key) to its spanflow edge keys
            (two keys when the edge was inserted in both directions).
    """

    to_ref: Dict[EdgeKey, EdgeRef] = field(default_factory=dict)
    from_ref: Dict[EdgeRef, List[EdgeKey]] = field(default_factory=dict)

    def add(self, key: EdgeKey, ref: EdgeRef) -> None:
        self.to_ref[key] = ref
        self.from_ref.setdefault(ref, []).append(key)

    def __len__(self) -> int:
        """Return the number of edge mappings."""
        return len(self.to_ref)


def from_networkx(
    G: NxGraph,
    *,
    capacity_attr: str = "capacity",
    value_attr: str = "value",
    pos_attr: str = "pos",
    default_capacity: Optional[float] = None,
    bidirectional: Optional[bool] = None,
) -> Tuple[Graph, EdgeMap]:
    """Convert a NetworkX graph into a spanflow ``Graph``.

    Nodes are inserted in NetworkX iteration order, so the first node of ``G``
    is the default MST root. Node labels must be integers; they become the
    external ids.

    Args:
        G: NetworkX graph (DiGraph, MultiDiGraph, Graph, or MultiGraph).
        capacity_attr: Edge attribute holding the capacity.
        value_attr: Node attribute holding the node value (default 0.0).
        pos_attr: Node attribute holding an ``(x, y)`` pair (default origin).
        default_capacity: Capacity for edges without ``capacity_attr``;
            defaults to ``ENGINE_CONFIG.default_capacity``.
        bidirectional: Insert each edge in both directions. Defaults to True
            for undirected inputs and False for directed ones.

    Returns:
        Tuple of (graph, edge_map).

    Raises:
        TypeError: If G is not a NetworkX graph.
        GraphValidationError: If a node label is not an integer or a capacity
            is invalid.
    """
    if not isinstance(G, (nx.DiGraph, nx.MultiDiGraph, nx.Graph, nx.MultiGraph)):
        raise TypeError(
            f"Expected NetworkX graph (DiGraph, MultiDiGraph, Graph, MultiGraph), "
            f"got {type(G).__name__}"
        )

    if default_capacity is None:
        default_capacity = ENGINE_CONFIG.default_capacity
    if bidirectional is None:
        bidirectional = not G.is_directed()

    graph = Graph()
    for n, data in G.nodes(data=True):
        x, y = data.get(pos_attr, (0.0, 0.0))
        graph.insert_node(n, value=data.get(value_attr, 0.0), x=x, y=y)

    if G.is_multigraph():
        edges_iter = G.edges(keys=True, data=True)
    else:
        edges_iter = ((u, v, 0, d) for u, v, d in G.edges(data=True))

    edge_map = EdgeMap()
    for u, v, key, data in edges_iter:
        cap = data.get(capacity_attr, default_capacity)
        ref: EdgeRef = (u, v, key)
        if bidirectional:
            for edge_key in graph.insert_undirected_edge(u, v, cap):
                edge_map.add(edge_key, ref)
        else:
            edge_map.add(graph.insert_edge(u, v, cap), ref)

    return graph, edge_map


def to_networkx(
    graph: Graph,
    *,
    capacity_attr: str = "capacity",
    flow_attr: str = "flow",
) -> nx.MultiDiGraph:
    """Convert a spanflow ``Graph`` to a NetworkX MultiDiGraph.

    Node labels are the external ids, with ``value`` and ``pos`` attributes.
    Edge keys are the spanflow edge keys; current flows are included.
    """
    G = nx.MultiDiGraph()
    for node in graph.nodes():
        G.add_node(node.id, value=node.value, pos=node.position)

    for edge in graph.edges():
        G.add_edge(
            edge.from_id,
            edge.to_id,
            key=edge.key,
            **{capacity_attr: edge.capacity, flow_attr: edge.flow},
        )

    return G


def ensure_integer_labels(G: NxGraph) -> NxGraph:
    """Relabel a NetworkX graph to consecutive integers if any label is not one.

    Original labels are kept in the ``label`` node attribute.
    """
    if all(isinstance(n, int) and not isinstance(n, bool) for n in G.nodes()):
        return G
    return nx.convert_node_labels_to_integers(G, label_attribute="label")
