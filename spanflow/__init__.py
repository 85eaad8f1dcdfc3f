"""spanflow: weighted-graph engine for minimum spanning trees and maximum flow.

Primary API:
    Graph - Directed graph addressed by external integer ids
    minimum_spanning_tree() - Prim's algorithm over outgoing edges
    calc_max_flow() - Edmonds-Karp over forward edges, flow kept on the graph
    create_graph(), insert_node(), insert_edge(), compute_mst(),
    compute_max_flow() - Functional wrappers
    from_networkx() / to_networkx() - NetworkX interop

Example:
    from spanflow import Graph, calc_max_flow, minimum_spanning_tree

    g = Graph()
    for node_id in (1, 2, 3):
        g.insert_node(node_id)
    g.insert_undirected_edge(1, 2, 1.0)
    g.insert_undirected_edge(2, 3, 2.0)

    tree = minimum_spanning_tree(g)
    flow = calc_max_flow(g, 1, 3)
"""

from __future__ import annotations

from spanflow import cli, logging
from spanflow._version import __version__
from spanflow.algorithms.max_flow import (
    FlowSummary,
    calc_max_flow,
    find_augmenting_path,
    node_imbalance,
)
from spanflow.algorithms.mst import TreeEdge, minimum_spanning_tree, tree_weight
from spanflow.api import (
    compute_max_flow,
    compute_mst,
    create_graph,
    insert_edge,
    insert_node,
)
from spanflow.config import ENGINE_CONFIG, EngineConfig
from spanflow.graph import (
    EdgeView,
    Graph,
    GraphValidationError,
    IdIndex,
    Node,
    Registry,
    UnknownNodeError,
)
from spanflow.io import graph_from_dict, graph_to_dict, load_graph, load_graph_yaml
from spanflow.lib.nx import EdgeMap, from_networkx, to_networkx

__all__ = [
    # Version
    "__version__",
    # Model
    "Graph",
    "Node",
    "EdgeView",
    "Registry",
    "IdIndex",
    # Errors
    "UnknownNodeError",
    "GraphValidationError",
    # Algorithms
    "minimum_spanning_tree",
    "tree_weight",
    "TreeEdge",
    "calc_max_flow",
    "find_augmenting_path",
    "node_imbalance",
    "FlowSummary",
    # Functional API
    "create_graph",
    "insert_node",
    "insert_edge",
    "compute_mst",
    "compute_max_flow",
    # Configuration
    "EngineConfig",
    "ENGINE_CONFIG",
    # Documents
    "graph_from_dict",
    "graph_to_dict",
    "load_graph",
    "load_graph_yaml",
    # Library integrations (NetworkX)
    "EdgeMap",
    "from_networkx",
    "to_networkx",
    # Utilities
    "cli",
    "logging",
]
