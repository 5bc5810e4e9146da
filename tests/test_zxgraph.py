"""Tests for the ZXGraph class."""

from __future__ import annotations

from fractions import Fraction

import networkx as nx
import pytest

from zxextract import common
from zxextract.common import EdgeType, SpiderType, is_pauli_phase, is_proper_clifford_phase, normalize_phase
from zxextract.zxgraph import ZXGraph, insert_identity


@pytest.fixture
def graph() -> ZXGraph:
    """Generate an empty ZXGraph object.

    Returns
    -------
        ZXGraph: An empty ZXGraph object.
    """
    return ZXGraph()


def test_add_spider(graph: ZXGraph) -> None:
    node = graph.add_spider(SpiderType.Z, Fraction(5, 2), qubit=1, column=3)
    assert node in graph.spiders
    assert graph.num_spiders == 1
    assert graph.spider_type(node) == SpiderType.Z
    assert graph.phase(node) == Fraction(1, 2)
    assert graph.qubit(node) == 1
    assert graph.column(node) == 3


def test_spider_indices_are_not_reused(graph: ZXGraph) -> None:
    node1 = graph.add_spider(SpiderType.Z)
    graph.remove_spider(node1)
    node2 = graph.add_spider(SpiderType.Z)
    assert node2 != node1


def test_boundary_with_phase_raises(graph: ZXGraph) -> None:
    with pytest.raises(ValueError, match="Boundary spiders cannot carry a phase"):
        graph.add_spider(SpiderType.IN, Fraction(1, 2))
    node = graph.add_spider(SpiderType.OUT)
    with pytest.raises(ValueError, match="Boundary spiders cannot carry a phase"):
        graph.set_phase(node, 1)
    graph.set_phase(node, 2)
    assert graph.phase(node) == 0


def test_ensure_node_exists_raises(graph: ZXGraph) -> None:
    with pytest.raises(ValueError, match="Node does not exist node=1"):
        graph.phase(1)


def test_add_edge(graph: ZXGraph) -> None:
    node1 = graph.add_spider(SpiderType.Z)
    node2 = graph.add_spider(SpiderType.Z)
    graph.add_edge(node1, node2)
    assert graph.has_edge(node2, node1)
    assert graph.is_hadamard(node1, node2)
    assert graph.edges == {(node1, node2)}
    assert graph.num_edges == 1
    assert graph.neighbors(node1) == {node2}
    assert graph.degree(node2) == 1


def test_add_edge_errors(graph: ZXGraph) -> None:
    node1 = graph.add_spider(SpiderType.Z)
    node2 = graph.add_spider(SpiderType.Z)
    graph.add_edge(node1, node2, EdgeType.SIMPLE)
    with pytest.raises(ValueError, match="Edge already exists"):
        graph.add_edge(node2, node1)
    with pytest.raises(ValueError, match="Self-loops are not allowed"):
        graph.add_edge(node1, node1)
    with pytest.raises(ValueError, match="Node does not exist"):
        graph.add_edge(node1, 100)


def test_remove_edge(graph: ZXGraph) -> None:
    node1 = graph.add_spider(SpiderType.Z)
    node2 = graph.add_spider(SpiderType.Z)
    graph.add_edge(node1, node2)
    graph.remove_edge(node2, node1)
    assert not graph.has_edge(node1, node2)
    with pytest.raises(ValueError, match="Edge does not exist"):
        graph.remove_edge(node1, node2)
    with pytest.raises(ValueError, match="Edge does not exist"):
        graph.edge_type(node1, node2)


def test_remove_spider_removes_edges(graph: ZXGraph) -> None:
    node1 = graph.add_spider(SpiderType.Z)
    node2 = graph.add_spider(SpiderType.Z)
    node3 = graph.add_spider(SpiderType.Z)
    graph.add_edge(node1, node2)
    graph.add_edge(node2, node3)
    graph.remove_spider(node2)
    assert graph.spiders == {node1, node3}
    assert graph.num_edges == 0
    assert graph.neighbors(node1) == set()


def test_toggle_hadamard_edge(graph: ZXGraph) -> None:
    node1 = graph.add_spider(SpiderType.Z)
    node2 = graph.add_spider(SpiderType.Z)
    graph.toggle_hadamard_edge(node1, node2)
    assert graph.is_hadamard(node1, node2)
    graph.toggle_hadamard_edge(node2, node1)
    assert not graph.has_edge(node1, node2)
    graph.add_edge(node1, node2, EdgeType.SIMPLE)
    with pytest.raises(ValueError, match="Cannot toggle a simple edge"):
        graph.toggle_hadamard_edge(node1, node2)


def test_add_to_phase(graph: ZXGraph) -> None:
    node = graph.add_spider(SpiderType.Z, Fraction(3, 2))
    graph.add_to_phase(node, Fraction(3, 4))
    assert graph.phase(node) == Fraction(1, 4)
    graph.add_to_phase(node, -Fraction(1, 4))
    assert graph.phase(node) == 0


def test_inputs_outputs_sorted_by_qubit(graph: ZXGraph) -> None:
    out1 = graph.add_spider(SpiderType.OUT, qubit=1)
    out0 = graph.add_spider(SpiderType.OUT, qubit=0)
    in1 = graph.add_spider(SpiderType.IN, qubit=1)
    in0 = graph.add_spider(SpiderType.IN, qubit=0)
    graph.add_spider(SpiderType.Z, qubit=0)
    assert graph.inputs == [in0, in1]
    assert graph.outputs == [out0, out1]


def test_set_location(graph: ZXGraph) -> None:
    node = graph.add_spider(SpiderType.Z, qubit=0, column=1)
    graph.set_location(node, 2, Fraction(5, 2))
    assert graph.qubit(node) == 2
    assert graph.column(node) == Fraction(5, 2)
    graph.set_column(node, 4)
    assert graph.qubit(node) == 2
    assert graph.column(node) == 4


def test_global_phase_normalized(graph: ZXGraph) -> None:
    graph.global_phase = Fraction(9, 4)
    assert graph.global_phase == Fraction(1, 4)
    graph.global_phase += Fraction(7, 4)
    assert graph.global_phase == 0


def test_copy_is_independent(graph: ZXGraph) -> None:
    node1 = graph.add_spider(SpiderType.Z, Fraction(1, 4))
    node2 = graph.add_spider(SpiderType.Z)
    graph.add_edge(node1, node2)
    copied = graph.copy()
    copied.remove_edge(node1, node2)
    copied.set_phase(node1, 0)
    assert graph.has_edge(node1, node2)
    assert graph.phase(node1) == Fraction(1, 4)
    assert copied.add_spider(SpiderType.Z) == graph.add_spider(SpiderType.Z)


def test_to_networkx(graph: ZXGraph) -> None:
    in0 = graph.add_spider(SpiderType.IN, qubit=0)
    node = graph.add_spider(SpiderType.Z, Fraction(1, 2), qubit=0, column=1)
    out0 = graph.add_spider(SpiderType.OUT, qubit=0, column=2)
    graph.add_edge(in0, node, EdgeType.SIMPLE)
    graph.add_edge(node, out0)

    nx_graph = graph.to_networkx()
    assert set(nx_graph.nodes) == graph.spiders
    assert {tuple(sorted(edge)) for edge in nx_graph.edges} == graph.edges
    assert nx_graph.nodes[node]["phase"] == Fraction(1, 2)
    assert nx_graph.nodes[out0]["spider_type"] == SpiderType.OUT
    assert nx_graph.edges[in0, node]["edge_type"] == EdgeType.SIMPLE
    assert nx.shortest_path_length(nx_graph, in0, out0) == 2
    for spider in graph.spiders:
        assert nx_graph.degree(spider) == graph.degree(spider)


@pytest.mark.parametrize(
    ("edge_type", "expected"),
    [(EdgeType.HADAMARD, EdgeType.SIMPLE), (EdgeType.SIMPLE, EdgeType.HADAMARD)],
)
def test_insert_identity(graph: ZXGraph, edge_type: EdgeType, expected: EdgeType) -> None:
    boundary = graph.add_spider(SpiderType.IN, qubit=3, column=0)
    node = graph.add_spider(SpiderType.Z, Fraction(1, 4), qubit=1, column=2)
    graph.add_edge(boundary, node, edge_type)

    new_node = insert_identity(graph, boundary, node)
    assert not graph.has_edge(boundary, node)
    assert graph.spider_type(new_node) == SpiderType.Z
    assert graph.phase(new_node) == 0
    assert graph.qubit(new_node) == 3
    assert graph.column(new_node) == 1
    assert graph.edge_type(boundary, new_node) == EdgeType.HADAMARD
    assert graph.edge_type(new_node, node) == expected


def test_normalize_phase() -> None:
    assert normalize_phase(Fraction(-1, 2)) == Fraction(3, 2)
    assert normalize_phase(5) == 1
    with pytest.raises(TypeError, match="Phase must be an exact rational"):
        normalize_phase(0.5)  # type: ignore[arg-type]
    with pytest.raises(TypeError, match="Phase must be an exact rational"):
        normalize_phase(True)


def test_phase_classes() -> None:
    assert is_pauli_phase(0)
    assert is_pauli_phase(Fraction(3))
    assert not is_pauli_phase(Fraction(1, 2))
    assert is_proper_clifford_phase(Fraction(-1, 2))
    assert not is_proper_clifford_phase(Fraction(1, 4))


def test_common_docstring_names_exist() -> None:
    assert common.__doc__ is not None
    listed = [line.split("`")[1] for line in common.__doc__.splitlines() if line.startswith("- `")]
    assert "PhaseLike" in listed
    for name in listed:
        assert hasattr(common, name), name
