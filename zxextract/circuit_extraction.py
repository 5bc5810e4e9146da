"""Circuit extraction from graph-like ZX-diagrams.

This module provides:

- `ExtractionError`: Base class of extraction failures.
- `StalledExtractionError`: Raised when the frontier stops advancing.
- `InvariantViolationError`: Raised when the diagram is not in the expected form.
- `biadjacency`: Biadjacency matrix between two vertex lists.
- `update_frontier`: Advance the frontier by one round.
- `circuit_extraction`: Extract a circuit from a graph-like ZX-diagram.

The algorithm works from the outputs back to the inputs, so every gate is
prepended to the circuit.

Reference:
    R. Duncan, A. Kissinger, S. Perdrix, J. van de Wetering,
    "Graph-theoretic Simplification of Quantum Circuits with the ZX-calculus",
    Quantum 4, 279 (2020). https://arxiv.org/abs/1902.03178
"""

from __future__ import annotations

import itertools
import logging
from fractions import Fraction
from typing import TYPE_CHECKING

import numpy as np

from zxextract.circuit import Circuit
from zxextract.common import EdgeType, SpiderType
from zxextract.linalg import AddTo, Swap, gaussian_elimination
from zxextract.rules import HadamardCancellationRule, IdentityRemovalRule
from zxextract.simplify import simplify_to_fixed_point
from zxextract.zxgraph import insert_identity

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray

    from zxextract.linalg import GEStep
    from zxextract.zxgraph import ZXGraph

logger = logging.getLogger(__name__)

# consecutive rounds without a newly extracted vertex before giving up
_STALL_ROUNDS = 2


class ExtractionError(RuntimeError):
    """Base class for errors raised during circuit extraction."""


class StalledExtractionError(ExtractionError):
    """The frontier can no longer advance, usually because the diagram has no gflow."""


class InvariantViolationError(ExtractionError):
    """The diagram or an intermediate state is not in the form extraction relies on."""


def _qubit_order(graph: ZXGraph, nodes: Sequence[int]) -> list[int]:
    return sorted(nodes, key=lambda node: (graph.qubit(node), node))


def biadjacency(graph: ZXGraph, rows: Sequence[int], cols: Sequence[int]) -> NDArray[np.uint8]:
    r"""Build the biadjacency matrix between two lists of vertices.

    Parameters
    ----------
    graph : `ZXGraph`
        graph to read; it is not modified
    rows : `collections.abc.Sequence`\[`int`\]
        vertices labelling the rows
    cols : `collections.abc.Sequence`\[`int`\]
        vertices labelling the columns

    Returns
    -------
    `numpy.typing.NDArray`\[`numpy.uint8`\]
        matrix with a 1 where the row and column vertices are adjacent,
        whatever the edge type

    Raises
    ------
    ValueError
        If either list contains a vertex twice.
    """
    if len(set(rows)) != len(rows) or len(set(cols)) != len(cols):
        msg = "Row and column vertices must not contain duplicates"
        raise ValueError(msg)
    col_index = {node: j for j, node in enumerate(cols)}
    matrix = np.zeros((len(rows), len(cols)), dtype=np.uint8)
    for i, node in enumerate(rows):
        for nbr in graph.neighbors(node):
            j = col_index.get(nbr)
            if j is not None:
                matrix[i, j] = 1
    return matrix


def _prepend_swap(circuit: Circuit, qubit1: int, qubit2: int) -> None:
    circuit.cnot(qubit1, qubit2, prepend=True)
    circuit.cnot(qubit2, qubit1, prepend=True)
    circuit.cnot(qubit1, qubit2, prepend=True)


def _prepend_row_operations(
    graph: ZXGraph, frontier: Sequence[int], steps: Sequence[GEStep], circuit: Circuit
) -> None:
    """Turn the row operations on the frontier into CNOT gates."""
    for step in steps:
        if isinstance(step, AddTo):
            circuit.cnot(graph.qubit(frontier[step.target]), graph.qubit(frontier[step.source]), prepend=True)
        else:
            _prepend_swap(circuit, graph.qubit(frontier[step.row1]), graph.qubit(frontier[step.row2]))


def update_frontier(graph: ZXGraph, frontier: Sequence[int], circuit: Circuit) -> list[int]:
    r"""Advance the frontier by one round of extraction.

    The frontier is row reduced against its neighbourhood. Each row operation
    becomes a CNOT, each neighbour that ends up connected to a single frontier
    vertex replaces that vertex, and the Hadamard and phase between them are
    extracted. Hadamard edges left between newly extracted vertices become CZ
    gates.

    Parameters
    ----------
    graph : `ZXGraph`
        graph being extracted; modified in place
    frontier : `collections.abc.Sequence`\[`int`\]
        current frontier, sorted by qubit
    circuit : `Circuit`
        circuit that receives the extracted gates at the front

    Returns
    -------
    `list`\[`int`\]
        new frontier sorted by qubit
    """
    active = [node for node in frontier if graph.spider_type(node) == SpiderType.Z and graph.degree(node) > 0]
    if not active:
        return list(frontier)

    nbrs = _qubit_order(graph, list(set().union(*(graph.neighbors(node) for node in active))))
    matrix = biadjacency(graph, active, nbrs)
    reduced, steps = gaussian_elimination(matrix)

    candidates: list[tuple[int, int]] = []
    for i, row in enumerate(reduced):
        cols = np.flatnonzero(row)
        if cols.size == 1:
            candidates.append((active[i], nbrs[int(cols[0])]))

    for i, j in zip(*np.nonzero(matrix)):
        graph.remove_edge(active[int(i)], nbrs[int(j)])
    for i, j in zip(*np.nonzero(reduced)):
        graph.add_edge(active[int(i)], nbrs[int(j)], EdgeType.HADAMARD)

    _prepend_row_operations(graph, active, steps, circuit)

    new_frontier = list(active)
    for v, w in candidates:
        if graph.degree(v) != 1:
            continue
        qubit_v = graph.qubit(v)
        circuit.h(qubit_v, prepend=True)
        if graph.spider_type(w) == SpiderType.Z:
            circuit.phase(qubit_v, graph.phase(w), prepend=True)
            graph.set_phase(w, 0)
            if graph.qubit(w) != qubit_v:
                column_v = graph.column(v)
                graph.set_location(w, qubit_v, column_v)
                graph.set_column(v, column_v + Fraction(1, 2))
        graph.remove_edge(v, w)
        if graph.spider_type(w) == SpiderType.IN:
            graph.add_edge(w, v, EdgeType.SIMPLE)
        new_frontier[new_frontier.index(v)] = w

    ws = [w for _, w in candidates]
    for w1, w2 in itertools.combinations(ws, 2):
        if graph.has_edge(w1, w2) and graph.is_hadamard(w1, w2):
            circuit.cz(graph.qubit(w1), graph.qubit(w2), prepend=True)
            graph.remove_edge(w1, w2)

    logger.debug("frontier round: %d row operations, %d candidates", len(steps), len(candidates))
    return _qubit_order(graph, new_frontier)


def _prepare_inputs(graph: ZXGraph) -> None:
    """Make every input reach an interior spider through a Hadamard edge."""
    for node in graph.inputs:
        if graph.degree(node) != 1:
            msg = f"Input must have exactly one neighbor {node=}, degree={graph.degree(node)}"
            raise InvariantViolationError(msg)
        (nbr,) = graph.neighbors(node)
        if not graph.is_hadamard(node, nbr) or graph.spider_type(nbr).is_boundary:
            insert_identity(graph, node, nbr)


def _extract_outputs(graph: ZXGraph, circuit: Circuit) -> list[int]:
    """Detach the outputs and extract the Hadamards and phases next to them."""
    frontier: list[int] = []
    for node in graph.outputs:
        if graph.degree(node) != 1:
            msg = f"Output must have exactly one neighbor {node=}, degree={graph.degree(node)}"
            raise InvariantViolationError(msg)
        (nbr,) = graph.neighbors(node)
        if graph.spider_type(nbr) != SpiderType.Z:
            msg = f"Output must be attached to a Z spider {node=}, neighbor={nbr}"
            raise InvariantViolationError(msg)
        qubit = graph.qubit(node)
        if graph.is_hadamard(node, nbr):
            circuit.h(qubit, prepend=True)
        circuit.phase(qubit, graph.phase(nbr), prepend=True)
        graph.set_phase(nbr, 0)
        graph.remove_edge(node, nbr)
        frontier.append(nbr)
    return frontier


def _process_frontier(graph: ZXGraph, frontier: Sequence[int], circuit: Circuit) -> None:
    """Extract Hadamard edges between frontier vertices as CZ gates."""
    for v, w in itertools.combinations(frontier, 2):
        if graph.has_edge(v, w) and graph.is_hadamard(v, w):
            circuit.cz(graph.qubit(v), graph.qubit(w), prepend=True)
            graph.remove_edge(v, w)


def _finalize_extraction(graph: ZXGraph, circuit: Circuit) -> None:
    """Undo the permutation left between the inputs and the last frontier with swaps."""
    inputs = graph.inputs
    frontier = _qubit_order(graph, [nbr for node in inputs for nbr in graph.neighbors(node)])
    if len(set(frontier)) != len(frontier):
        msg = f"Inputs must be attached to distinct frontier vertices, got {frontier}"
        raise InvariantViolationError(msg)
    _, steps = gaussian_elimination(biadjacency(graph, frontier, inputs))
    for step in steps:
        if isinstance(step, Swap):
            _prepend_swap(circuit, step.row1, step.row2)
        else:
            msg = f"Inputs are not connected to the frontier by a permutation, got {step}"
            raise InvariantViolationError(msg)


def circuit_extraction(graph: ZXGraph, *, max_rounds: int | None = None, cleanup: bool = True) -> Circuit:
    """Extract a circuit from a graph-like ZX-diagram.

    The diagram must have a gflow, which holds for diagrams obtained from a
    circuit and simplified with local complementation and pivoting.

    Parameters
    ----------
    graph : `ZXGraph`
        diagram to extract; it is copied and not modified
    max_rounds : `int` | `None`, optional
        maximum number of frontier rounds, by default unlimited
    cleanup : `bool`, optional
        remove identity phases and cancelling Hadamards at the end, by default True

    Returns
    -------
    `Circuit`
        extracted circuit carrying the global phase of the diagram.
        An empty circuit is returned when the numbers of inputs and outputs differ.

    Raises
    ------
    StalledExtractionError
        If the frontier stops advancing or `max_rounds` is exceeded.
    InvariantViolationError
        If a boundary is not attached to a single spider or the final
        frontier is not a permutation of the inputs.
    """
    work = graph.copy()
    inputs = work.inputs
    outputs = work.outputs
    num_qubits = work.num_qubits if work.num_qubits > 0 else len(outputs)

    circuit = Circuit(num_qubits)
    circuit.global_phase = work.global_phase
    if len(inputs) != len(outputs):
        logger.warning(
            "Cannot extract a circuit: %d inputs and %d outputs, returning an empty circuit",
            len(inputs),
            len(outputs),
        )
        return circuit

    _prepare_inputs(work)
    frontier = _extract_outputs(work, circuit)
    _process_frontier(work, frontier, circuit)

    extracted = set(outputs) | set(frontier)
    rounds = 0
    idle_rounds = 0
    while work.spiders - extracted:
        rounds += 1
        if max_rounds is not None and rounds > max_rounds:
            msg = f"Extraction did not finish within {max_rounds} rounds"
            raise StalledExtractionError(msg)
        frontier = update_frontier(work, frontier, circuit)
        num_extracted = len(extracted)
        extracted.update(frontier)
        logger.debug("round %d: %d of %d vertices extracted", rounds, len(extracted), work.num_spiders)
        if len(extracted) > num_extracted:
            idle_rounds = 0
            continue
        idle_rounds += 1
        if idle_rounds >= _STALL_ROUNDS:
            remaining = sorted(work.spiders - extracted)
            msg = f"Frontier stopped advancing after {rounds} rounds, remaining vertices {remaining}"
            raise StalledExtractionError(msg)

    _finalize_extraction(work, circuit)

    if cleanup:
        simplify_to_fixed_point(IdentityRemovalRule(), circuit)
        simplify_to_fixed_point(HadamardCancellationRule(), circuit)
    logger.debug("extracted %d gates on %d qubits", circuit.num_gates, num_qubits)
    return circuit
