"""Rewrite rules for graph-like ZX-diagrams and circuits.

This module provides:

- `Rule`: Abstract match/rewrite interface used by `zxextract.simplify`.
- `LocalComplementRule`: Remove an interior spider with phase pi/2 or 3pi/2.
- `PivotRule`: Remove two adjacent interior Pauli spiders.
- `PivotBoundaryRule`: Pivot an interior Pauli spider with a Pauli spider next to a boundary.
- `IdentityRemovalRule`: Drop phase gates with a zero angle from a circuit.
- `HadamardCancellationRule`: Drop pairs of adjacent H gates from a circuit.

Reference:
    R. Duncan, A. Kissinger, S. Perdrix, J. van de Wetering,
    Quantum 4, 279 (2020). https://doi.org/10.22331/q-2020-06-04-279
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from fractions import Fraction
from typing import TYPE_CHECKING, Generic, TypeVar

import typing_extensions

from zxextract.circuit import Circuit
from zxextract.common import EdgeType, SpiderType, is_pauli_phase, is_proper_clifford_phase, normalize_phase
from zxextract.gates import H, Phase, XPhase
from zxextract.zxgraph import ZXGraph, insert_identity

if TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Set as AbstractSet


TargetT = TypeVar("TargetT")
MatchT = TypeVar("MatchT")


class Rule(ABC, Generic[TargetT, MatchT]):
    """Abstract rewrite rule.

    `match` reports matches against the current target. Applying one match may
    invalidate others, so `rewrite` re-checks every match right before it is
    applied and skips the stale ones.
    """

    @abstractmethod
    def match(self, target: TargetT) -> list[MatchT]:
        r"""Find matches of the rule.

        Parameters
        ----------
        target : `TargetT`
            graph or circuit to search

        Returns
        -------
        `list`\[`MatchT`\]
            matches in a deterministic order
        """
        raise NotImplementedError

    @abstractmethod
    def check(self, target: TargetT, match: MatchT) -> bool:
        """Check that a match still applies to the target.

        Parameters
        ----------
        target : `TargetT`
            graph or circuit
        match : `MatchT`
            match to check

        Returns
        -------
        `bool`
            `True` if the match can be applied
        """
        raise NotImplementedError

    @abstractmethod
    def apply(self, target: TargetT, match: MatchT) -> None:
        """Apply a single checked match.

        Parameters
        ----------
        target : `TargetT`
            graph or circuit to modify
        match : `MatchT`
            match to apply
        """
        raise NotImplementedError

    def rewrite(self, target: TargetT, matches: Iterable[MatchT]) -> None:
        r"""Apply every match that is still valid, in order.

        Parameters
        ----------
        target : `TargetT`
            graph or circuit to modify
        matches : `collections.abc.Iterable`\[`MatchT`\]
            matches returned by `match`
        """
        for m in matches:
            if self.check(target, m):
                self.apply(target, m)


def _is_interior(graph: ZXGraph, node: int) -> bool:
    """Check if all neighbors are Z spiders reached through Hadamard edges."""
    return all(
        graph.spider_type(nbr) == SpiderType.Z and graph.edge_type(node, nbr) == EdgeType.HADAMARD
        for nbr in graph.neighbors(node)
    )


def _remove_isolated(graph: ZXGraph, nodes: AbstractSet[int]) -> None:
    """Remove spiders left without any edge; they only contribute a scalar."""
    for node in nodes:
        if node in graph.spiders and graph.degree(node) == 0 and not graph.spider_type(node).is_boundary:
            graph.remove_spider(node)


def _pivot(graph: ZXGraph, node1: int, node2: int) -> None:
    """Pivot along the edge between two interior Pauli spiders and remove both."""
    nbrs1 = graph.neighbors(node1) - {node2}
    nbrs2 = graph.neighbors(node2) - {node1}
    common = nbrs1 & nbrs2
    only1 = nbrs1 - common
    only2 = nbrs2 - common
    for part_a, part_b in ((only1, only2), (only1, common), (only2, common)):
        for a, b in itertools.product(sorted(part_a), sorted(part_b)):
            graph.toggle_hadamard_edge(a, b)

    phase1 = graph.phase(node1)
    phase2 = graph.phase(node2)
    for node in only1:
        graph.add_to_phase(node, phase2)
    for node in only2:
        graph.add_to_phase(node, phase1)
    for node in common:
        graph.add_to_phase(node, phase1 + phase2 + 1)
    if phase1 == 1 and phase2 == 1:
        graph.global_phase += 1

    graph.remove_spider(node1)
    graph.remove_spider(node2)
    _remove_isolated(graph, nbrs1 | nbrs2)


class LocalComplementRule(Rule[ZXGraph, int]):
    """Local complementation (``lc``).

    An interior Z spider with phase pi/2 or 3pi/2 is removed; the Hadamard
    edges among its neighbours are complemented and its phase is subtracted
    from each neighbour.
    """

    @typing_extensions.override
    def match(self, target: ZXGraph) -> list[int]:
        matches: list[int] = []
        consumed: set[int] = set()
        for node in sorted(target.spiders):
            if node in consumed or not self.check(target, node):
                continue
            matches.append(node)
            consumed |= target.neighbors(node) | {node}
        return matches

    @typing_extensions.override
    def check(self, target: ZXGraph, match: int) -> bool:
        if match not in target.spiders:
            return False
        if target.spider_type(match) != SpiderType.Z:
            return False
        return is_proper_clifford_phase(target.phase(match)) and _is_interior(target, match)

    @typing_extensions.override
    def apply(self, target: ZXGraph, match: int) -> None:
        phase = target.phase(match)
        nbrs = sorted(target.neighbors(match))
        for nbr in nbrs:
            target.add_to_phase(nbr, -phase)
        for a, b in itertools.combinations(nbrs, 2):
            target.toggle_hadamard_edge(a, b)
        target.global_phase += Fraction(1, 4) if phase == Fraction(1, 2) else Fraction(7, 4)
        target.remove_spider(match)
        _remove_isolated(target, set(nbrs))


class PivotRule(Rule[ZXGraph, tuple[int, int]]):
    """Pivoting (``p1``) on a Hadamard edge between two interior Pauli spiders."""

    @typing_extensions.override
    def match(self, target: ZXGraph) -> list[tuple[int, int]]:
        matches: list[tuple[int, int]] = []
        consumed: set[int] = set()
        for edge in sorted(target.edges):
            if consumed & set(edge) or not self.check(target, edge):
                continue
            matches.append(edge)
            consumed |= target.neighbors(edge[0]) | target.neighbors(edge[1])
        return matches

    @typing_extensions.override
    def check(self, target: ZXGraph, match: tuple[int, int]) -> bool:
        node1, node2 = match
        spiders = target.spiders
        if node1 not in spiders or node2 not in spiders or not target.has_edge(node1, node2):
            return False
        return all(
            target.spider_type(node) == SpiderType.Z
            and is_pauli_phase(target.phase(node))
            and _is_interior(target, node)
            for node in match
        )

    @typing_extensions.override
    def apply(self, target: ZXGraph, match: tuple[int, int]) -> None:
        _pivot(target, *match)


class PivotBoundaryRule(Rule[ZXGraph, tuple[int, int, int]]):
    """Pivoting with a boundary (``pab``).

    Matches ``(u, v, b)`` where ``u`` is an interior Pauli spider and ``v`` is
    an adjacent Pauli spider whose only non-Z neighbour is the boundary ``b``.
    An identity spider is first inserted between ``v`` and ``b`` so that ``v``
    becomes interior, then ``u`` and ``v`` are pivoted away.
    """

    @typing_extensions.override
    def match(self, target: ZXGraph) -> list[tuple[int, int, int]]:
        matches: list[tuple[int, int, int]] = []
        consumed: set[int] = set()
        for node in sorted(target.spiders):
            if node in consumed:
                continue
            for nbr in sorted(target.neighbors(node)):
                if nbr in consumed:
                    continue
                boundary = self._boundary_of(target, nbr)
                if boundary is None or not self.check(target, (node, nbr, boundary)):
                    continue
                matches.append((node, nbr, boundary))
                consumed |= target.neighbors(node) | target.neighbors(nbr) | {node}
                break
        return matches

    @staticmethod
    def _boundary_of(graph: ZXGraph, node: int) -> int | None:
        boundaries = [nbr for nbr in graph.neighbors(node) if graph.spider_type(nbr).is_boundary]
        if len(boundaries) != 1:
            return None
        return boundaries[0]

    @typing_extensions.override
    def check(self, target: ZXGraph, match: tuple[int, int, int]) -> bool:
        node, nbr, boundary = match
        spiders = target.spiders
        if any(v not in spiders for v in match):
            return False
        if not target.has_edge(node, nbr) or not target.is_hadamard(node, nbr):
            return False
        if self._boundary_of(target, nbr) != boundary:
            return False
        if any(target.spider_type(v) != SpiderType.Z or not is_pauli_phase(target.phase(v)) for v in (node, nbr)):
            return False
        if not _is_interior(target, node):
            return False
        return all(
            target.spider_type(v) == SpiderType.Z and target.is_hadamard(nbr, v)
            for v in target.neighbors(nbr) - {boundary}
        )

    @typing_extensions.override
    def apply(self, target: ZXGraph, match: tuple[int, int, int]) -> None:
        node, nbr, boundary = match
        insert_identity(target, nbr, boundary)
        _pivot(target, node, nbr)


class _CircuitRule(Rule[Circuit, MatchT]):
    """Rule that deletes gates from a circuit.

    Matches are sets of gate positions. All positions of a batch are removed
    from the back so that the remaining positions stay valid.
    """

    @abstractmethod
    def positions(self, match: MatchT) -> tuple[int, ...]:
        """Return the gate positions covered by the match."""
        raise NotImplementedError

    @staticmethod
    def _remove_gates(target: Circuit, positions: Iterable[int]) -> None:
        for index in sorted(set(positions), reverse=True):
            target.remove_gate(index)

    @typing_extensions.override
    def apply(self, target: Circuit, match: MatchT) -> None:
        self._remove_gates(target, self.positions(match))

    @typing_extensions.override
    def rewrite(self, target: Circuit, matches: Iterable[MatchT]) -> None:
        # removing one match at a time would shift the positions of the others
        valid = [m for m in matches if self.check(target, m)]
        self._remove_gates(target, (i for m in valid for i in self.positions(m)))


class IdentityRemovalRule(_CircuitRule[int]):
    """Remove Z- and X-phase gates whose angle is zero (``i1``)."""

    @typing_extensions.override
    def match(self, target: Circuit) -> list[int]:
        return [index for index, gate in enumerate(target.instructions()) if self._is_identity(gate)]

    @staticmethod
    def _is_identity(gate: object) -> bool:
        return isinstance(gate, (Phase, XPhase)) and normalize_phase(gate.angle) == 0

    @typing_extensions.override
    def check(self, target: Circuit, match: int) -> bool:
        return 0 <= match < target.num_gates and self._is_identity(target.instructions()[match])

    @typing_extensions.override
    def positions(self, match: int) -> tuple[int, ...]:
        return (match,)


class HadamardCancellationRule(_CircuitRule[tuple[int, int]]):
    """Remove two H gates on one qubit with nothing acting on that qubit in between (``i2``)."""

    @typing_extensions.override
    def match(self, target: Circuit) -> list[tuple[int, int]]:
        matches: list[tuple[int, int]] = []
        last_gate: dict[int, int | None] = {}
        instructions = target.instructions()
        for index, gate in enumerate(instructions):
            if isinstance(gate, H):
                previous = last_gate.get(gate.qubit)
                if previous is not None and isinstance(instructions[previous], H):
                    matches.append((previous, index))
                    last_gate[gate.qubit] = None
                    continue
            for qubit in gate.get_qubits():
                last_gate[qubit] = index
        return matches

    @typing_extensions.override
    def check(self, target: Circuit, match: tuple[int, int]) -> bool:
        first, second = match
        instructions = target.instructions()
        if not 0 <= first < second < len(instructions):
            return False
        gate1, gate2 = instructions[first], instructions[second]
        if not isinstance(gate1, H) or not isinstance(gate2, H) or gate1.qubit != gate2.qubit:
            return False
        return all(gate1.qubit not in gate.get_qubits() for gate in instructions[first + 1 : second])

    @typing_extensions.override
    def positions(self, match: tuple[int, int]) -> tuple[int, ...]:
        return match
