"""Graph algorithms: Prim's minimum spanning tree and Edmonds-Karp max flow."""

from spanflow.algorithms.max_flow import (
    FlowSummary,
    calc_max_flow,
    find_augmenting_path,
    node_imbalance,
)
from spanflow.algorithms.mst import TreeEdge, minimum_spanning_tree, tree_weight

__all__ = [
    "FlowSummary",
    "TreeEdge",
    "calc_max_flow",
    "find_augmenting_path",
    "minimum_spanning_tree",
    "node_imbalance",
    "tree_weight",
]
