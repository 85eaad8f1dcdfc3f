"""Shared graph fixtures."""

from __future__ import annotations

from typing import Callable, Iterable, Tuple

import pytest

from spanflow.graph import Graph

EdgeSpec = Tuple[int, int, float]


def _build(
    nodes: Iterable[int], edges: Iterable[EdgeSpec], undirected: bool = False
) -> Graph:
    g = Graph()
    for node_id in nodes:
        g.insert_node(node_id, value=float(node_id), x=float(node_id), y=0.0)
    for u, v, cap in edges:
        if undirected:
            g.insert_undirected_edge(u, v, cap)
        else:
            g.insert_edge(u, v, cap)
    return g


@pytest.fixture
def make_graph() -> Callable[..., Graph]:
    """Factory: ``make_graph(nodes, edges, undirected=False)``."""
    return _build


@pytest.fixture
def diamond() -> Graph:
    # Capacity:
    #        [3]       [2]
    #     ┌──────►2──────┐
    #     │              ▼
    #     1              4
    #     │              ▲
    #     └──────►3──────┘
    #        [2]       [3]
    #
    # Edge keys follow insertion order: 1->2=0, 1->3=1, 2->4=2, 3->4=3
    return _build([1, 2, 3, 4], [(1, 2, 3), (1, 3, 2), (2, 4, 2), (3, 4, 3)])


@pytest.fixture
def triangle() -> Graph:
    # Weight (both directions):
    #       [1]       [2]
    #    1───────2───────3
    #    └───────────────┘
    #           [5]
    return _build([1, 2, 3], [(1, 2, 1), (2, 3, 2), (1, 3, 5)], undirected=True)


@pytest.fixture
def crossed() -> Graph:
    # All capacities 1. BFS takes s-a-c-t first, which blocks s-b-c-t and
    # leaves a->d->t reachable only by cancelling flow on a->c.
    #
    #   s ──► a ──► c ──► t
    #   │     │     ▲     ▲
    #   │     └──► d ─────┘
    #   └──► b ─────┘
    #
    # s=1, a=2, b=3, c=4, d=5, t=6
    return _build(
        [1, 2, 3, 4, 5, 6],
        [(1, 2, 1), (1, 3, 1), (2, 4, 1), (2, 5, 1), (3, 4, 1), (4, 6, 1), (5, 6, 1)],
    )
