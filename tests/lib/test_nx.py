import networkx as nx
import pytest

from spanflow.algorithms.max_flow import calc_max_flow
from spanflow.graph import GraphValidationError
from spanflow.lib.nx import EdgeMap, ensure_integer_labels, from_networkx, to_networkx


def test_from_undirected_inserts_both_directions():
    G = nx.Graph()
    G.add_edge(1, 2, capacity=1.0)
    G.add_edge(2, 3, capacity=2.0)

    graph, edge_map = from_networkx(G)

    assert len(graph) == 3
    assert graph.number_of_edges() == 4
    assert {(e.from_id, e.to_id) for e in graph.edges()} == {
        (1, 2),
        (2, 1),
        (2, 3),
        (3, 2),
    }
    assert len(edge_map) == 4
    assert edge_map.from_ref[(1, 2, 0)] == [0, 1]
    assert edge_map.to_ref[1] == (1, 2, 0)


def test_from_directed_keeps_direction():
    G = nx.DiGraph()
    G.add_edge(1, 2, capacity=4.0)

    graph, _ = from_networkx(G)
    assert [e[:3] for e in graph.edges()] == [(1, 2, 4.0)]


def test_from_directed_bidirectional_override():
    G = nx.DiGraph()
    G.add_edge(1, 2, capacity=4.0)

    graph, _ = from_networkx(G, bidirectional=True)
    assert [e[:3] for e in graph.edges()] == [(1, 2, 4.0), (2, 1, 4.0)]


def test_from_multidigraph_keeps_parallel_edges():
    G = nx.MultiDiGraph()
    G.add_edge(1, 2, key="a", capacity=1.0)
    G.add_edge(1, 2, key="b", capacity=2.0)

    graph, edge_map = from_networkx(G)
    assert [e.capacity for e in graph.edges()] == [1.0, 2.0]
    assert edge_map.to_ref == {0: (1, 2, "a"), 1: (1, 2, "b")}


def test_node_attributes_and_defaults():
    G = nx.DiGraph()
    G.add_node(1, value=2.5, pos=(1.0, -1.0))
    G.add_node(2)
    G.add_edge(1, 2)

    graph, _ = from_networkx(G)
    assert graph.node(1).value == 2.5
    assert graph.node(1).position == (1.0, -1.0)
    assert graph.node(2).position == (0.0, 0.0)
    assert graph.edges()[0].capacity == 1.0

    graph, _ = from_networkx(G, default_capacity=7.0, capacity_attr="cap")
    assert graph.edges()[0].capacity == 7.0


def test_from_networkx_rejects_bad_input():
    with pytest.raises(TypeError, match="Expected NetworkX graph"):
        from_networkx({1: [2]})  # type: ignore[arg-type]

    G = nx.Graph()
    G.add_edge("a", "b")
    with pytest.raises(GraphValidationError):
        from_networkx(G)


def test_ensure_integer_labels():
    G = nx.Graph()
    G.add_edge("a", "b", capacity=3.0)
    relabelled = ensure_integer_labels(G)

    assert sorted(relabelled.nodes()) == [0, 1]
    assert {d["label"] for _, d in relabelled.nodes(data=True)} == {"a", "b"}
    graph, _ = from_networkx(relabelled)
    assert graph.number_of_edges() == 2

    H = nx.Graph()
    H.add_edge(1, 2)
    assert ensure_integer_labels(H) is H


def test_to_networkx_carries_flow(diamond):
    calc_max_flow(diamond, 1, 4)
    G = to_networkx(diamond)

    assert isinstance(G, nx.MultiDiGraph)
    assert list(G.nodes()) == [1, 2, 3, 4]
    assert G.nodes[2]["pos"] == (2.0, 0.0)
    assert G.edges[1, 2, 0] == {"capacity": 3.0, "flow": 2.0}
    assert G.edges[3, 4, 3] == {"capacity": 3.0, "flow": 2.0}


def test_round_trip_through_networkx(diamond):
    graph, edge_map = from_networkx(to_networkx(diamond))
    assert [e[:3] for e in graph.edges()] == [e[:3] for e in diamond.edges()]
    assert isinstance(edge_map, EdgeMap)
