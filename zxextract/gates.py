"""Module for gates used in circuit representation.

This module provides:
- Gate: Abstract class for gates.
- SingleGate: Base class for single qubit gates.
- TwoQubitGate: Base class for two qubit gates.
- H: Class for the H gate.
- Phase: Class for the Z-phase gate.
- XPhase: Class for the X-phase gate.
- CNOT: Class for the CNOT gate.
- CZ: Class for the CZ gate.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from fractions import Fraction

    from numpy.typing import NDArray

_H_MATRIX = np.asarray([[1, 1], [1, -1]], dtype=np.complex128) / np.sqrt(2)


def _phase_matrix(angle: Fraction) -> NDArray[np.complex128]:
    return np.asarray([[1, 0], [0, np.exp(1j * np.pi * float(angle))]], dtype=np.complex128)


class Gate(ABC):
    """Abstract class for gates."""

    @abstractmethod
    def get_qubits(self) -> tuple[int, ...]:
        """Get the qubits the gate acts on, in the order of the matrix axes.

        Returns
        -------
        tuple[int, ...]
            Qubit indices.
        """
        raise NotImplementedError

    @abstractmethod
    def get_matrix(self) -> NDArray[np.complex128]:
        """Get the matrix representation of the gate.

        Returns
        -------
        NDArray[np.complex128]
            Matrix representation of the gate.
        """
        raise NotImplementedError


class SingleGate(Gate):
    """Base class for single qubit gates."""

    qubit: int

    def get_qubits(self) -> tuple[int, ...]:
        """Get the qubits the gate acts on.

        Returns
        -------
        tuple[int, ...]
            Qubit indices.
        """
        return (self.qubit,)


class TwoQubitGate(Gate):
    """Base class for two qubit gates."""

    qubits: tuple[int, int]

    def get_qubits(self) -> tuple[int, ...]:
        """Get the qubits the gate acts on.

        Returns
        -------
        tuple[int, ...]
            Qubit indices.
        """
        return self.qubits


@dataclass(frozen=True)
class H(SingleGate):
    """Class for the H gate.

    Attributes
    ----------
    qubit : int
        The qubit the gate acts on.
    """

    qubit: int

    def get_matrix(self) -> NDArray[np.complex128]:  # noqa: PLR6301
        """Get the matrix representation of the gate.

        Returns
        -------
        NDArray[np.complex128]
            Matrix representation of the gate.
        """
        return _H_MATRIX.copy()


@dataclass(frozen=True)
class Phase(SingleGate):
    r"""Class for the Z-phase gate.

    This is the gate a single Z spider with one input and one output leg
    implements.

    Attributes
    ----------
    qubit : int
        The qubit the gate acts on.
    angle : Fraction
        The phase in units of pi.

        .. math::
        P(\\alpha) =
        \\begin{pmatrix}
        1 & 0 \\\\
        0 & e^{i\\pi\\alpha}
        \\end{pmatrix}
    """

    qubit: int
    angle: Fraction

    def get_matrix(self) -> NDArray[np.complex128]:
        """Get the matrix representation of the gate.

        Returns
        -------
        NDArray[np.complex128]
            Matrix representation of the gate.
        """
        return _phase_matrix(self.angle)


@dataclass(frozen=True)
class XPhase(SingleGate):
    """Class for the X-phase gate, H P(angle) H.

    Attributes
    ----------
    qubit : int
        The qubit the gate acts on.
    angle : Fraction
        The phase in units of pi.
    """

    qubit: int
    angle: Fraction

    def get_matrix(self) -> NDArray[np.complex128]:
        """Get the matrix representation of the gate.

        Returns
        -------
        NDArray[np.complex128]
            Matrix representation of the gate.
        """
        array: NDArray[np.complex128] = _H_MATRIX @ _phase_matrix(self.angle) @ _H_MATRIX
        return array


@dataclass(frozen=True)
class CNOT(TwoQubitGate):
    """Class for the CNOT gate.

    Attributes
    ----------
    qubits : tuple[int, int]
        The control and target qubits, in this order.
    """

    qubits: tuple[int, int]

    @property
    def control(self) -> int:
        """Return the control qubit."""
        return self.qubits[0]

    @property
    def target(self) -> int:
        """Return the target qubit."""
        return self.qubits[1]

    def get_matrix(self) -> NDArray[np.complex128]:  # noqa: PLR6301
        """Get the matrix representation of the gate.

        Returns
        -------
        NDArray[np.complex128]
            Matrix representation of the gate.
        """
        return np.asarray([[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]], dtype=np.complex128)


@dataclass(frozen=True)
class CZ(TwoQubitGate):
    """Class for the CZ gate.

    Attributes
    ----------
    qubits : tuple[int, int]
        The qubits the gate acts on.
    """

    qubits: tuple[int, int]

    def get_matrix(self) -> NDArray[np.complex128]:  # noqa: PLR6301
        """Get the matrix representation of the gate.

        Returns
        -------
        NDArray[np.complex128]
            Matrix representation of the gate.
        """
        return np.asarray([[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, -1]], dtype=np.complex128)
