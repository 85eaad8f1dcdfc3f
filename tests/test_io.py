import json
from pathlib import Path

import pytest
import yaml

from spanflow.algorithms.max_flow import calc_max_flow
from spanflow.graph import GraphValidationError, UnknownNodeError
from spanflow.io import graph_from_dict, graph_to_dict, load_graph, load_graph_yaml

DIAMOND_YAML = """
nodes:
  - {id: 1, value: 0.5, pos: [0.0, 0.0]}
  - {id: 2, pos: [1.0, 1.0]}
  - {id: 3, pos: [1.0, -1.0]}
  - {id: 4}
edges:
  - {source: 1, target: 2, capacity: 3}
  - {source: 1, target: 3, capacity: 2}
  - {source: 2, target: 4, capacity: 2}
  - {source: 3, target: 4, capacity: 3}
"""


def test_load_graph_yaml_basic():
    g = load_graph_yaml(DIAMOND_YAML)
    assert len(g) == 4
    assert g.node(1).value == 0.5
    assert g.node(3).position == (1.0, -1.0)
    assert g.node(4).position == (0.0, 0.0)
    assert [e[:3] for e in g.edges()] == [
        (1, 2, 3.0),
        (1, 3, 2.0),
        (2, 4, 2.0),
        (3, 4, 3.0),
    ]
    assert calc_max_flow(g, 1, 4) == 4.0


def test_bidirectional_and_default_capacity():
    g = load_graph_yaml(
        """
        nodes: [{id: 1}, {id: 2}]
        edges:
          - {source: 1, target: 2, bidirectional: true}
        """
    )
    assert [e[:3] for e in g.edges()] == [(1, 2, 1.0), (2, 1, 1.0)]


def test_empty_document():
    assert len(load_graph_yaml("")) == 0
    assert len(load_graph_yaml("nodes: []\nedges: []")) == 0


@pytest.mark.parametrize(
    "doc, message",
    [
        ("- 1\n- 2", "dictionary at top-level"),
        ("nodes: {a: 1}", "'nodes' must be a list"),
        ("edges: {a: 1}", "'edges' must be a list"),
        ("nodes: [{value: 1}]", "Node entry #0 must be a mapping with an 'id'"),
        ("nodes: [{id: 1, pos: [1]}]", "'pos' must be a pair"),
        ("nodes: [{id: 1, colour: red}]", "Unrecognized key\\(s\\) in node entry #0"),
        ("nodes: [{id: 1}]\nedges: [{source: 1}]", "must include 'source' and 'target'"),
        ("nodes: [{id: 1}]\nedges: [5]", "Edge entry #0 must be a mapping"),
        ("links: []", "Unrecognized key\\(s\\) in graph document"),
        ("nodes: [{id: 1, value: null}]", "Node entry #0: 'value' must be a number"),
        ("nodes: [{id: 1, value: [1]}]", "Node entry #0: 'value' must be a number"),
        ("nodes: [{id: 1, pos: [null, 0]}]", "Node entry #0: 'pos' items"),
        ("nodes: [{id: 1}, {id: 2, pos: [0, x]}]", "Node entry #1: 'pos' items"),
        (
            "nodes: [{id: 1}, {id: 2}]\n"
            "edges: [{source: 1, target: 2, bidirectional: 'false'}]",
            "Edge entry #0: 'bidirectional' must be true or false",
        ),
        (
            "nodes: [{id: 1}, {id: 2}]\n"
            "edges: [{source: 1, target: 2, bidirectional: 1}]",
            "Edge entry #0: 'bidirectional'",
        ),
    ],
)
def test_malformed_documents(doc, message):
    with pytest.raises(ValueError, match=message):
        load_graph_yaml(doc)


def test_flow_key_is_not_accepted():
    with pytest.raises(ValueError, match="flow"):
        load_graph_yaml(
            "nodes: [{id: 1}, {id: 2}]\nedges: [{source: 1, target: 2, flow: 1}]"
        )


def test_graph_errors_pass_through():
    with pytest.raises(UnknownNodeError):
        load_graph_yaml("nodes: [{id: 1}]\nedges: [{source: 1, target: 2}]")
    with pytest.raises(GraphValidationError):
        load_graph_yaml("nodes: [{id: 1}, {id: 1}]")
    with pytest.raises(GraphValidationError):
        load_graph_yaml(
            "nodes: [{id: 1}, {id: 2}]\nedges: [{source: 1, target: 2, capacity: -1}]"
        )


def test_invalid_yaml_raises_yaml_error():
    with pytest.raises(yaml.YAMLError):
        load_graph_yaml("nodes: [{id: 1")


def test_load_graph_from_files(tmp_path: Path):
    yaml_path = tmp_path / "g.yaml"
    yaml_path.write_text(DIAMOND_YAML)
    json_path = tmp_path / "g.json"
    json_path.write_text(json.dumps(yaml.safe_load(DIAMOND_YAML)))

    from_yaml = load_graph(yaml_path)
    from_json = load_graph(str(json_path))
    assert from_yaml.edges() == from_json.edges()
    assert from_yaml.nodes() == from_json.nodes()


def test_graph_to_dict_round_trip():
    g = load_graph_yaml(DIAMOND_YAML)
    doc = graph_to_dict(g)
    assert doc["nodes"][0] == {"id": 1, "value": 0.5, "pos": [0.0, 0.0]}
    assert doc["edges"][0] == {"source": 1, "target": 2, "capacity": 3.0}

    again = graph_from_dict(doc)
    assert again.edges() == g.edges()
    assert again.nodes() == g.nodes()


def test_graph_to_dict_with_flow():
    g = load_graph_yaml(DIAMOND_YAML)
    calc_max_flow(g, 1, 4)
    edges = graph_to_dict(g, include_flow=True)["edges"]
    assert [e["flow"] for e in edges] == [2.0, 2.0, 2.0, 2.0]
