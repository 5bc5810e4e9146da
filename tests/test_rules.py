"""Tests for graph and circuit rewrite rules.

Reference:
    R. Duncan, A. Kissinger, S. Perdrix, J. van de Wetering,
    Quantum 4, 279 (2020). https://doi.org/10.22331/q-2020-06-04-279
"""

from __future__ import annotations

from fractions import Fraction

import numpy as np
import pytest

from zxextract.circuit import Circuit, circuit2graph
from zxextract.circuit_extraction import circuit_extraction
from zxextract.common import EdgeType, SpiderType
from zxextract.gates import CZ, H, Phase
from zxextract.matrix import is_equal_up_to_global_phase
from zxextract.random_objects import random_circuit
from zxextract.rules import (
    HadamardCancellationRule,
    IdentityRemovalRule,
    LocalComplementRule,
    PivotBoundaryRule,
    PivotRule,
)
from zxextract.simplify import apply_once
from zxextract.simulator import circuit_unitary
from zxextract.zxgraph import ZXGraph


@pytest.fixture
def graph() -> ZXGraph:
    return ZXGraph()


def _attach_output(graph: ZXGraph, node: int) -> int:
    out = graph.add_spider(SpiderType.OUT, qubit=graph.qubit(node))
    graph.add_edge(node, out, EdgeType.SIMPLE)
    return out


def test_local_complement(graph: ZXGraph) -> None:
    center = graph.add_spider(SpiderType.Z, Fraction(1, 2))
    nbr1 = graph.add_spider(SpiderType.Z, Fraction(1, 4), qubit=0)
    nbr2 = graph.add_spider(SpiderType.Z, qubit=1)
    nbr3 = graph.add_spider(SpiderType.Z, qubit=2)
    for nbr in (nbr1, nbr2, nbr3):
        graph.add_edge(center, nbr)
        _attach_output(graph, nbr)
    graph.add_edge(nbr1, nbr2)

    rule = LocalComplementRule()
    assert rule.match(graph) == [center]
    apply_once(rule, graph)

    assert center not in graph.spiders
    assert not graph.has_edge(nbr1, nbr2)
    assert graph.is_hadamard(nbr1, nbr3)
    assert graph.is_hadamard(nbr2, nbr3)
    assert graph.phase(nbr1) == Fraction(7, 4)
    assert graph.phase(nbr2) == Fraction(3, 2)
    assert graph.global_phase == Fraction(1, 4)


def test_local_complement_global_phase_three_halves(graph: ZXGraph) -> None:
    center = graph.add_spider(SpiderType.Z, Fraction(3, 2))
    nbr = graph.add_spider(SpiderType.Z, qubit=0)
    graph.add_edge(center, nbr)
    _attach_output(graph, nbr)
    apply_once(LocalComplementRule(), graph)
    assert graph.phase(nbr) == Fraction(1, 2)
    assert graph.global_phase == Fraction(7, 4)


def test_local_complement_needs_interior_spider(graph: ZXGraph) -> None:
    node = graph.add_spider(SpiderType.Z, Fraction(1, 2), qubit=0)
    _attach_output(graph, node)
    pauli = graph.add_spider(SpiderType.Z, Fraction(1))
    graph.add_edge(pauli, node)
    rule = LocalComplementRule()
    assert rule.match(graph) == []
    assert not rule.check(graph, node)
    assert not rule.check(graph, pauli)
    assert not rule.check(graph, 100)


def test_pivot(graph: ZXGraph) -> None:
    u = graph.add_spider(SpiderType.Z, qubit=0)
    v = graph.add_spider(SpiderType.Z, Fraction(1), qubit=1)
    only_u = graph.add_spider(SpiderType.Z, Fraction(1, 4), qubit=2)
    only_v = graph.add_spider(SpiderType.Z, Fraction(1, 4), qubit=3)
    common = graph.add_spider(SpiderType.Z, Fraction(1, 4), qubit=4)
    graph.add_edge(u, v)
    graph.add_edge(u, only_u)
    graph.add_edge(u, common)
    graph.add_edge(v, only_v)
    graph.add_edge(v, common)
    for node in (only_u, only_v, common):
        _attach_output(graph, node)

    rule = PivotRule()
    assert rule.match(graph) == [(u, v)]
    apply_once(rule, graph)

    assert u not in graph.spiders
    assert v not in graph.spiders
    assert graph.is_hadamard(only_u, only_v)
    assert graph.is_hadamard(only_u, common)
    assert graph.is_hadamard(only_v, common)
    assert graph.phase(only_u) == Fraction(5, 4)
    assert graph.phase(only_v) == Fraction(1, 4)
    assert graph.phase(common) == Fraction(1, 4)
    assert graph.global_phase == 0


def test_pivot_removes_isolated_spiders(graph: ZXGraph) -> None:
    u = graph.add_spider(SpiderType.Z, Fraction(1))
    v = graph.add_spider(SpiderType.Z, Fraction(1))
    leaf = graph.add_spider(SpiderType.Z)
    graph.add_edge(u, v)
    graph.add_edge(u, leaf)
    apply_once(PivotRule(), graph)
    assert graph.spiders == set()
    assert graph.global_phase == 1


def test_pivot_boundary(graph: ZXGraph) -> None:
    boundary = graph.add_spider(SpiderType.IN, qubit=0)
    v = graph.add_spider(SpiderType.Z, qubit=0)
    u = graph.add_spider(SpiderType.Z, Fraction(1), qubit=1)
    other = graph.add_spider(SpiderType.Z, Fraction(1, 4), qubit=1)
    graph.add_edge(boundary, v, EdgeType.SIMPLE)
    graph.add_edge(v, u)
    graph.add_edge(u, other)
    _attach_output(graph, other)

    rule = PivotBoundaryRule()
    assert PivotRule().match(graph) == []
    assert rule.match(graph) == [(u, v, boundary)]
    apply_once(rule, graph)

    assert u not in graph.spiders
    assert v not in graph.spiders
    (new_node,) = graph.neighbors(boundary)
    assert graph.spider_type(new_node) == SpiderType.Z
    assert graph.phase(new_node) == 1
    assert graph.is_hadamard(boundary, new_node)
    assert graph.is_hadamard(new_node, other)
    assert graph.phase(other) == Fraction(1, 4)


def test_circuit_identity_removal() -> None:
    circuit = Circuit(2)
    circuit.phase(0, 0)
    circuit.h(1)
    circuit.x_phase(1, 2)
    circuit.phase(0, Fraction(1, 2))
    rule = IdentityRemovalRule()
    assert rule.match(circuit) == [0, 2]
    apply_once(rule, circuit)
    assert circuit.instructions() == [H(1), Phase(0, Fraction(1, 2))]
    assert rule.match(circuit) == []


def test_circuit_hadamard_cancellation() -> None:
    circuit = Circuit(2)
    circuit.h(0)
    circuit.h(1)
    circuit.h(1)
    circuit.h(0)
    circuit.h(0)
    circuit.cz(0, 1)
    circuit.h(0)
    rule = HadamardCancellationRule()
    assert rule.match(circuit) == [(1, 2), (0, 3)]
    apply_once(rule, circuit)
    assert circuit.instructions() == [H(0), CZ((0, 1)), H(0)]
    assert rule.match(circuit) == []


def test_circuit_rule_apply_single_match() -> None:
    circuit = Circuit(2)
    circuit.h(0)
    circuit.h(1)
    circuit.h(1)
    circuit.h(0)
    rule = HadamardCancellationRule()
    assert rule.check(circuit, (1, 2))
    rule.apply(circuit, (1, 2))
    assert circuit.instructions() == [H(0), H(0)]
    rule.apply(circuit, (0, 1))
    assert circuit.num_gates == 0


def test_circuit_hadamard_cancellation_stale_match() -> None:
    circuit = Circuit(1)
    circuit.h(0)
    circuit.h(0)
    rule = HadamardCancellationRule()
    matches = rule.match(circuit)
    circuit.phase(0, Fraction(1, 4), prepend=True)
    assert not rule.check(circuit, matches[0])
    rule.rewrite(circuit, matches)
    assert circuit.num_gates == 3


@pytest.mark.parametrize("rule", [LocalComplementRule(), PivotRule(), PivotBoundaryRule()])
def test_graph_rules_preserve_semantics(rule: LocalComplementRule | PivotRule | PivotBoundaryRule) -> None:
    rng = np.random.default_rng(7)
    for _ in range(5):
        circuit = random_circuit(3, 25, rng, clifford=True)
        graph = circuit2graph(circuit)
        apply_once(rule, graph)
        extracted = circuit_extraction(graph)
        assert is_equal_up_to_global_phase(circuit_unitary(extracted), circuit_unitary(circuit))
