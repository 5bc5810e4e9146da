"""Circuit classes for encoding quantum operations.

This module provides:

- `BaseCircuit`: An abstract base class for quantum circuits.
- `Circuit`: A circuit class composed of H, phase, CNOT and CZ gates.
- `circuit2graph`: A function that converts a circuit to a graph-like ZX-diagram.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from fractions import Fraction
from typing import TYPE_CHECKING

import typing_extensions

from zxextract.common import EdgeType, SpiderType, normalize_phase
from zxextract.gates import CNOT, CZ, H, Phase, TwoQubitGate, XPhase
from zxextract.zxgraph import ZXGraph

if TYPE_CHECKING:
    from zxextract.common import PhaseLike
    from zxextract.gates import Gate


class BaseCircuit(ABC):
    """
    Abstract base class for quantum circuits.

    This class defines the interface for quantum circuit objects.
    It enforces implementation of core methods that must be present
    in any subclass representing a specific type of quantum circuit.
    """

    @property
    @abstractmethod
    def num_qubits(self) -> int:
        """Get the number of qubits in the circuit.

        Returns
        -------
        `int`
            The number of qubits in the circuit
        """
        raise NotImplementedError

    @abstractmethod
    def instructions(self) -> list[Gate]:
        r"""Get the list of instructions in the circuit.

        Returns
        -------
        `list`\[`Gate`\]
            List of gates in the circuit.
        """
        raise NotImplementedError


class Circuit(BaseCircuit):
    """A circuit class composed of H, phase, CNOT and CZ gates.

    Gates can be appended or prepended. Circuit extraction discovers gates
    from the outputs backwards and therefore prepends.
    """

    __num_qubits: int
    __gate_instructions: list[Gate]
    __global_phase: Fraction

    def __init__(self, num_qubits: int) -> None:
        if num_qubits < 0:
            msg = f"Number of qubits must be non-negative, got {num_qubits}"
            raise ValueError(msg)
        self.__num_qubits = num_qubits
        self.__gate_instructions = []
        self.__global_phase = Fraction(0)

    @property
    @typing_extensions.override
    def num_qubits(self) -> int:
        """Get the number of qubits in the circuit.

        Returns
        -------
        `int`
            The number of qubits in the circuit.
        """
        return self.__num_qubits

    @property
    def num_gates(self) -> int:
        """Get the number of gates in the circuit."""
        return len(self.__gate_instructions)

    @property
    def global_phase(self) -> Fraction:
        """Get the global phase of the circuit.

        Returns
        -------
        `fractions.Fraction`
            global phase in units of pi
        """
        return self.__global_phase

    @global_phase.setter
    def global_phase(self, phase: PhaseLike) -> None:
        self.__global_phase = normalize_phase(phase)

    @typing_extensions.override
    def instructions(self) -> list[Gate]:
        r"""Get the list of instructions in the circuit.

        Returns
        -------
        `list`\[`Gate`\]
            List of gates in the circuit.
        """
        return list(self.__gate_instructions)

    def add_gate(self, gate: Gate, *, prepend: bool = False) -> None:
        """Add a gate to the circuit.

        Parameters
        ----------
        gate : `Gate`
            The gate to add.
        prepend : `bool`, optional
            Insert the gate at the front instead of the back, by default False.

        Raises
        ------
        ValueError
            If a qubit index is out of range, or a two qubit gate acts twice on one qubit.
        """
        qubits = gate.get_qubits()
        for qubit in qubits:
            if not 0 <= qubit < self.__num_qubits:
                msg = f"Qubit index out of range {qubit=}, num_qubits={self.__num_qubits}"
                raise ValueError(msg)
        if isinstance(gate, TwoQubitGate) and qubits[0] == qubits[1]:
            msg = f"Two qubit gate must act on distinct qubits {gate=}"
            raise ValueError(msg)
        if prepend:
            self.__gate_instructions.insert(0, gate)
        else:
            self.__gate_instructions.append(gate)

    def remove_gate(self, index: int) -> Gate:
        """Remove the gate at the given position.

        Parameters
        ----------
        index : `int`
            position of the gate

        Returns
        -------
        `Gate`
            The removed gate.
        """
        return self.__gate_instructions.pop(index)

    def h(self, qubit: int, *, prepend: bool = False) -> None:
        """Add an H gate to the circuit.

        Parameters
        ----------
        qubit : `int`
            The qubit index.
        prepend : `bool`, optional
            Insert the gate at the front, by default False.
        """
        self.add_gate(H(qubit=qubit), prepend=prepend)

    def phase(self, qubit: int, angle: PhaseLike, *, prepend: bool = False) -> None:
        """Add a Z-phase gate to the circuit.

        Parameters
        ----------
        qubit : `int`
            The qubit index.
        angle : `fractions.Fraction` | `int`
            The phase in units of pi.
        prepend : `bool`, optional
            Insert the gate at the front, by default False.
        """
        self.add_gate(Phase(qubit=qubit, angle=normalize_phase(angle)), prepend=prepend)

    def x_phase(self, qubit: int, angle: PhaseLike, *, prepend: bool = False) -> None:
        """Add an X-phase gate to the circuit.

        Parameters
        ----------
        qubit : `int`
            The qubit index.
        angle : `fractions.Fraction` | `int`
            The phase in units of pi.
        prepend : `bool`, optional
            Insert the gate at the front, by default False.
        """
        self.add_gate(XPhase(qubit=qubit, angle=normalize_phase(angle)), prepend=prepend)

    def cnot(self, control: int, target: int, *, prepend: bool = False) -> None:
        """Add a CNOT gate to the circuit.

        Parameters
        ----------
        control : `int`
            The control qubit index.
        target : `int`
            The target qubit index.
        prepend : `bool`, optional
            Insert the gate at the front, by default False.
        """
        self.add_gate(CNOT(qubits=(control, target)), prepend=prepend)

    def cz(self, qubit1: int, qubit2: int, *, prepend: bool = False) -> None:
        """Add a CZ gate to the circuit.

        Parameters
        ----------
        qubit1 : `int`
            The first qubit index.
        qubit2 : `int`
            The second qubit index.
        prepend : `bool`, optional
            Insert the gate at the front, by default False.
        """
        self.add_gate(CZ(qubits=(qubit1, qubit2)), prepend=prepend)


class _Circuit2GraphContext:
    """Internal helper tracking the open end of every wire during conversion.

    Each wire ends either in its input boundary or in a Z spider. A pending
    Hadamard is carried on the wire until the next spider is attached, where it
    becomes a Hadamard edge.
    """

    graph: ZXGraph
    qindex2front_nodes: dict[int, int]
    pending_hadamard: dict[int, bool]
    current_column: int

    def __init__(self, num_qubits: int) -> None:
        self.graph = ZXGraph(num_qubits)
        self.qindex2front_nodes = {}
        self.pending_hadamard = {}
        self.current_column = 0
        for qubit in range(num_qubits):
            node = self.graph.add_spider(SpiderType.IN, qubit=qubit, column=0)
            self.qindex2front_nodes[qubit] = node
            self.pending_hadamard[qubit] = False

    def apply_instruction(self, instruction: Gate) -> None:
        """Apply a gate to the graph conversion context.

        Raises
        ------
        TypeError
            If the instruction type is not supported.
        """
        self.current_column += 1
        if isinstance(instruction, H):
            self._apply_h(instruction.qubit)
            return
        if isinstance(instruction, Phase):
            self._apply_phase(instruction.qubit, instruction.angle)
            return
        if isinstance(instruction, XPhase):
            self._apply_h(instruction.qubit)
            self._apply_phase(instruction.qubit, instruction.angle)
            self._apply_h(instruction.qubit)
            return
        if isinstance(instruction, CZ):
            self._apply_cz(*instruction.qubits)
            return
        if isinstance(instruction, CNOT):
            self._apply_h(instruction.target)
            self._apply_cz(instruction.control, instruction.target)
            self._apply_h(instruction.target)
            return
        msg = f"Invalid instruction: {instruction}"
        raise TypeError(msg)

    def _z_spider(self, qubit: int) -> int:
        """Return a Z spider at the open end of the wire, creating one if needed."""
        front = self.qindex2front_nodes[qubit]
        if self.graph.spider_type(front) == SpiderType.Z and not self.pending_hadamard[qubit]:
            return front
        node = self.graph.add_spider(SpiderType.Z, qubit=qubit, column=self.current_column)
        edge_type = EdgeType.HADAMARD if self.pending_hadamard[qubit] else EdgeType.SIMPLE
        self.graph.add_edge(front, node, edge_type)
        self.qindex2front_nodes[qubit] = node
        self.pending_hadamard[qubit] = False
        return node

    def _apply_h(self, qubit: int) -> None:
        self.pending_hadamard[qubit] = not self.pending_hadamard[qubit]

    def _apply_phase(self, qubit: int, angle: Fraction) -> None:
        node = self._z_spider(qubit)
        self.graph.add_to_phase(node, angle)

    def _apply_cz(self, qubit1: int, qubit2: int) -> None:
        node1 = self._z_spider(qubit1)
        node2 = self._z_spider(qubit2)
        self.graph.toggle_hadamard_edge(node1, node2)

    def close(self) -> ZXGraph:
        """Attach the output boundaries and return the finished graph."""
        output_column = self.current_column + 1
        for qubit, front in self.qindex2front_nodes.items():
            if self.graph.spider_type(front) != SpiderType.Z:
                front = self._z_spider(qubit)
            node = self.graph.add_spider(SpiderType.OUT, qubit=qubit, column=output_column)
            edge_type = EdgeType.HADAMARD if self.pending_hadamard[qubit] else EdgeType.SIMPLE
            self.graph.add_edge(front, node, edge_type)
        return self.graph


def circuit2graph(circuit: BaseCircuit) -> ZXGraph:
    """Convert a circuit to a graph-like ZX-diagram.

    Consecutive Z phases on a wire are fused into one spider, CNOT is realised
    as H-CZ-H on the target and X phases as H-phase-H. Every wire gets at least
    one Z spider between its boundaries.

    Parameters
    ----------
    circuit : `BaseCircuit`
        The quantum circuit to convert.

    Returns
    -------
    `ZXGraph`
        The graph-like diagram; interior spiders are Z spiders joined by Hadamard edges.

    Raises
    ------
    TypeError
        If the circuit contains an invalid instruction.
    """
    context = _Circuit2GraphContext(circuit.num_qubits)
    for instruction in circuit.instructions():
        context.apply_instruction(instruction)
    graph = context.close()
    if isinstance(circuit, Circuit):
        graph.global_phase = circuit.global_phase
    return graph
