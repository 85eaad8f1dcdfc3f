"""Graph storage: node/edge registry, identifier index and the ``Graph`` aggregate.

The registry is a strict ``networkx.MultiDiGraph`` whose node keys are dense
integer handles issued on insertion (an arena index). Callers never see those
handles unless they ask for them; they address nodes by their own external
integer ids, which the ``IdIndex`` translates.

Storage is directed only. An "undirected" edge is two directed edges, inserted
explicitly by the caller (``Graph.insert_undirected_edge`` does both at once).

A ``Graph`` has no internal locking. Callers sharing one instance across
threads must serialize access themselves: one writer at a time, and no reader
overlapping a max-flow computation, which mutates edge flow in place.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Integral, Real
from pickle import dumps, loads
from typing import Any, Dict, Iterator, List, NamedTuple, Tuple

import networkx as nx

NodeID = int
NodeHandle = int
EdgeKey = int
AttrDict = Dict[str, Any]
EdgeTuple = Tuple[NodeHandle, NodeHandle, EdgeKey, AttrDict]


class UnknownNodeError(KeyError):
    """An external node id was used before being registered."""

    def __init__(self, node_id: Any) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Node id {self.node_id!r} is not registered."


class GraphValidationError(ValueError):
    """Input rejected before touching the graph (bad id, bad capacity)."""


@dataclass(frozen=True)
class Node:
    """A vertex as registered by the caller.

    Attributes:
        id: External identifier, unique within a graph.
        value: Opaque payload; the algorithms never read it.
        position: 2D position ``(x, y)``.
    """

    id: NodeID
    value: float = 0.0
    position: Tuple[float, float] = (0.0, 0.0)


class EdgeView(NamedTuple):
    """Read-only snapshot of one directed edge, in external ids."""

    from_id: NodeID
    to_id: NodeID
    capacity: float
    flow: float
    key: EdgeKey

    @property
    def residual(self) -> float:
        return self.capacity - self.flow


class Registry(nx.MultiDiGraph):
    """
    Multi-directed graph holding nodes by handle and edges by integer key.

    This class enforces:
      - No automatic creation of missing nodes when adding an edge.
      - No duplicate node handles (raising ValueError on duplicates).
      - Edge keys are issued from a monotonically increasing counter, so the
        key order is the insertion order.
      - copy() is a pickle-based deep copy.

    Node and edge removal are not supported; a registry lives as long as the
    graph that owns it.

    Inherits from:
        networkx.MultiDiGraph
    """

    def __init__(self, *args, **kwargs) -> None:
        """
        Initialize an empty Registry.

        Attributes:
            _edges (Dict[EdgeKey, EdgeTuple]): Maps an edge key to a tuple
                (source_handle, target_handle, edge_key, attribute_dict).
            _next_edge_key (int): Next key handed out by ``new_edge_key``.
        """
        super().__init__(*args, **kwargs)
        self._edges: Dict[EdgeKey, EdgeTuple] = {}
        self._next_edge_key: int = 0

    def new_edge_key(self, u: NodeHandle, v: NodeHandle) -> EdgeKey:
        """
        Issue the next edge key.

        Args:
            u (NodeHandle): The source node of the new edge.
            v (NodeHandle): The target node of the new edge.

        Returns:
            EdgeKey: A key not used by any edge of this registry.
        """
        key = self._next_edge_key
        self._next_edge_key += 1
        return key

    def copy(self) -> Registry:
        """Deep copy through pickle, edge attribute dicts included."""
        return loads(dumps(self))

    @property
    def next_handle(self) -> NodeHandle:
        """The handle the next inserted node will receive."""
        return self.number_of_nodes()

    #
    # Node management
    #
    def add_node(self, node_for_adding: NodeHandle, **attr: Any) -> None:
        """
        Add a single node, disallowing duplicates.

        Args:
            node_for_adding (NodeHandle): The handle to add.
            **attr: Arbitrary attributes for this node.

        Raises:
            ValueError: If the handle already exists in the registry.
        """
        if node_for_adding in self:
            raise ValueError(f"Node handle '{node_for_adding}' already exists.")
        super().add_node(node_for_adding, **attr)

    #
    # Edge management
    #
    def add_edge(
        self,
        u_for_edge: NodeHandle,
        v_for_edge: NodeHandle,
        **attr: Any,
    ) -> EdgeKey:
        """
        Add a directed edge from u_for_edge to v_for_edge under a fresh key.

        Both endpoints must already exist; nodes are never created implicitly.

        Args:
            u_for_edge (NodeHandle): The source handle. Must exist.
            v_for_edge (NodeHandle): The target handle. Must exist.
            **attr: Arbitrary edge attributes.

        Returns:
            EdgeKey: The key issued for the new edge.

        Raises:
            ValueError: If either node does not exist.
        """
        if u_for_edge not in self:
            raise ValueError(f"Source node '{u_for_edge}' does not exist.")
        if v_for_edge not in self:
            raise ValueError(f"Target node '{v_for_edge}' does not exist.")

        key = self.new_edge_key(u_for_edge, v_for_edge)
        super().add_edge(u_for_edge, v_for_edge, key=key, **attr)
        self._edges[key] = (
            u_for_edge,
            v_for_edge,
            key,
            self[u_for_edge][v_for_edge][key],
        )
        return key

    #
    # Convenience methods
    #
    def get_edges(self) -> Dict[EdgeKey, EdgeTuple]:
        """
        Retrieve all edges by key, in insertion order.

        Returns:
            Dict[EdgeKey, EdgeTuple]: A mapping of edge key to a tuple
                (source_handle, target_handle, edge_key, edge_attributes).
        """
        return self._edges

    def get_edge_attr(self, key: EdgeKey) -> AttrDict:
        """
        Retrieve the attribute dictionary of a specific edge.

        Args:
            key (EdgeKey): The edge key.

        Returns:
            AttrDict: The live attribute dictionary for the edge.

        Raises:
            ValueError: If no edge with this key is found.
        """
        if key not in self._edges:
            raise ValueError(f"Edge with id='{key}' not found.")
        return self._edges[key][3]

    def out_edge_items(
        self, u: NodeHandle
    ) -> Iterator[Tuple[NodeHandle, EdgeKey, AttrDict]]:
        """
        Iterate over outgoing edges of ``u`` as ``(target, key, attrs)``.

        Order follows target insertion order, then key order.
        """
        for v, keyed in self.succ[u].items():
            for key, attrs in keyed.items():
                yield v, key, attrs


@dataclass
class IdIndex:
    """One-to-one mapping between external node ids and registry handles.

    Attributes:
        to_handle: Maps external ids to registry handles.
        to_id: Maps registry handles back to external ids.
    """

    to_handle: Dict[NodeID, NodeHandle] = field(default_factory=dict)
    to_id: Dict[NodeHandle, NodeID] = field(default_factory=dict)

    def register(self, node_id: NodeID, handle: NodeHandle) -> None:
        """Record a new id/handle pair.

        Raises:
            GraphValidationError: If the id or the handle is already mapped.
        """
        if node_id in self.to_handle:
            raise GraphValidationError(f"Node id {node_id!r} already exists.")
        if handle in self.to_id:
            raise GraphValidationError(f"Node handle {handle!r} is already mapped.")
        self.to_handle[node_id] = handle
        self.to_id[handle] = node_id

    def handle_of(self, node_id: NodeID) -> NodeHandle:
        try:
            return self.to_handle[node_id]
        except (KeyError, TypeError):
            raise UnknownNodeError(node_id) from None

    def id_of(self, handle: NodeHandle) -> NodeID:
        try:
            return self.to_id[handle]
        except KeyError:
            raise ValueError(f"Node handle '{handle}' is not allocated.") from None

    def __contains__(self, node_id: object) -> bool:
        try:
            return node_id in self.to_handle
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self.to_handle)


def _validate_node_id(node_id: Any) -> NodeID:
    if isinstance(node_id, bool) or not isinstance(node_id, Integral):
        raise GraphValidationError(
            f"Node id must be an integer, got {type(node_id).__name__} {node_id!r}."
        )
    return int(node_id)


def _validate_capacity(capacity: Any) -> float:
    if isinstance(capacity, bool) or not isinstance(capacity, Real):
        raise GraphValidationError(
            f"Capacity must be a real number, got {type(capacity).__name__} {capacity!r}."
        )
    value = float(capacity)
    if not math.isfinite(value):
        raise GraphValidationError(f"Capacity must be finite, got {value}.")
    if value < 0:
        raise GraphValidationError(f"Capacity must be non-negative, got {value}.")
    return value


def _validate_real(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise GraphValidationError(
            f"Node {name} must be a real number, got {type(value).__name__} {value!r}."
        )
    return float(value)


class Graph:
    """Directed weighted graph addressed by external integer ids.

    Edge capacity doubles as the weight for minimum spanning trees. Edge flow
    starts at 0.0 and is only changed by the max-flow solver or ``reset_flow``.

    Example:
        >>> g = Graph()
        >>> g.insert_node(1, value=0.5, x=0.0, y=0.0)
        0
        >>> g.insert_node(2)
        1
        >>> g.insert_edge(1, 2, 3.0)
        0
        >>> [e.capacity for e in g.out_edges(1)]
        [3.0]
    """

    def __init__(self) -> None:
        self.registry = Registry()
        self.index = IdIndex()

    def __len__(self) -> int:
        return len(self.index)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.index

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self)}, edges={self.number_of_edges()})"

    #
    # Construction
    #
    def insert_node(
        self, node_id: NodeID, value: float = 0.0, x: float = 0.0, y: float = 0.0
    ) -> NodeHandle:
        """Register a node and return its registry handle.

        Args:
            node_id: External id; must be an integer not registered before.
            value: Opaque payload stored on the node.
            x: Horizontal position.
            y: Vertical position.

        Returns:
            The handle issued by the registry (the insertion ordinal).

        Raises:
            GraphValidationError: If the id is not an integer or is already
                registered, or if ``value``, ``x`` or ``y`` is not a real
                number. The graph is left unchanged.
        """
        node_id = _validate_node_id(node_id)
        if node_id in self.index:
            raise GraphValidationError(f"Node id {node_id!r} already exists.")

        node = Node(
            id=node_id,
            value=_validate_real("value", value),
            position=(_validate_real("x", x), _validate_real("y", y)),
        )
        handle = self.registry.next_handle
        self.registry.add_node(handle, node=node)
        self.index.register(node_id, handle)
        return handle

    def insert_edge(self, from_id: NodeID, to_id: NodeID, capacity: float) -> EdgeKey:
        """Add a directed edge ``from_id -> to_id`` with zero flow.

        Args:
            from_id: Registered id of the tail node.
            to_id: Registered id of the head node.
            capacity: Non-negative, finite edge capacity (also the MST weight).

        Returns:
            The registry key of the new edge.

        Raises:
            UnknownNodeError: If either id was never registered.
            GraphValidationError: If the capacity is negative, NaN or infinite.
        """
        u = self.index.handle_of(from_id)
        v = self.index.handle_of(to_id)
        cap = _validate_capacity(capacity)
        return self.registry.add_edge(u, v, capacity=cap, flow=0.0)

    def insert_undirected_edge(
        self, a_id: NodeID, b_id: NodeID, capacity: float
    ) -> Tuple[EdgeKey, EdgeKey]:
        """Insert ``a -> b`` and ``b -> a`` with the same capacity.

        Both directions are validated before either is inserted.
        """
        u = self.index.handle_of(a_id)
        v = self.index.handle_of(b_id)
        cap = _validate_capacity(capacity)
        forward = self.registry.add_edge(u, v, capacity=cap, flow=0.0)
        backward = self.registry.add_edge(v, u, capacity=cap, flow=0.0)
        return forward, backward

    #
    # Lookups
    #
    def handle_of(self, node_id: NodeID) -> NodeHandle:
        return self.index.handle_of(node_id)

    def id_of(self, handle: NodeHandle) -> NodeID:
        return self.index.id_of(handle)

    def has_node(self, node_id: NodeID) -> bool:
        return node_id in self.index

    def node(self, node_id: NodeID) -> Node:
        return self.registry.nodes[self.index.handle_of(node_id)]["node"]

    def nodes(self) -> List[Node]:
        """All nodes in insertion order."""
        return [data["node"] for _, data in self.registry.nodes(data=True)]

    def number_of_edges(self) -> int:
        return len(self.registry.get_edges())

    def edges(self) -> List[EdgeView]:
        """All edges in insertion order."""
        return [
            self._edge_view(u, v, key, attrs)
            for u, v, key, attrs in self.registry.get_edges().values()
        ]

    def edge(self, key: EdgeKey) -> EdgeView:
        u, v, _, attrs = self.registry.get_edges()[key]
        return self._edge_view(u, v, key, attrs)

    def out_edges(self, node_id: NodeID) -> List[EdgeView]:
        u = self.index.handle_of(node_id)
        return [
            self._edge_view(u, v, key, attrs)
            for v, key, attrs in self.registry.out_edge_items(u)
        ]

    def _edge_view(
        self, u: NodeHandle, v: NodeHandle, key: EdgeKey, attrs: AttrDict
    ) -> EdgeView:
        return EdgeView(
            from_id=self.index.to_id[u],
            to_id=self.index.to_id[v],
            capacity=attrs["capacity"],
            flow=attrs["flow"],
            key=key,
        )

    #
    # State
    #
    def reset_flow(self) -> None:
        """Set the flow of every edge back to 0.0."""
        for _, _, _, attrs in self.registry.get_edges().values():
            attrs["flow"] = 0.0

    def copy(self) -> Graph:
        """Deep copy: registry, index and current flows."""
        clone = Graph()
        clone.registry = self.registry.copy()
        clone.index = IdIndex(
            to_handle=dict(self.index.to_handle), to_id=dict(self.index.to_id)
        )
        return clone
