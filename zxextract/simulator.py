"""Circuit simulation.

This module provides:

- `circuit_unitary`: Compute the unitary matrix of a circuit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from zxextract.circuit import Circuit

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray

    from zxextract.circuit import BaseCircuit


def _evolve(
    tensor: NDArray[np.complex128], operator: NDArray[np.complex128], qubits: Sequence[int]
) -> NDArray[np.complex128]:
    """Apply an operator to some qubit axes of a tensor and restore the axis order."""
    num_axes = tensor.ndim
    rest = tuple(i for i in range(num_axes) if i not in qubits)
    perm = tuple(qubits) + rest

    view = tensor.transpose(perm).reshape(2 ** len(qubits), -1)
    op_view = operator.reshape(2 ** len(qubits), 2 ** len(qubits))
    new_tensor = (op_view @ view).reshape((2,) * num_axes)

    inv_perm = np.argsort(perm)
    return new_tensor.transpose(inv_perm)


def circuit_unitary(circuit: BaseCircuit) -> NDArray[np.complex128]:
    r"""Compute the unitary matrix implemented by a circuit.

    Qubit 0 is the most significant bit of the basis index.

    Parameters
    ----------
    circuit : `BaseCircuit`
        circuit to evaluate

    Returns
    -------
    `numpy.typing.NDArray`\[`numpy.complex128`\]
        ``2**n x 2**n`` matrix including the global phase of the circuit
    """
    num_qubits = circuit.num_qubits
    dim = 2**num_qubits
    # the row axes are acted on; the column axes label the input basis state
    tensor = np.eye(dim, dtype=np.complex128).reshape((2,) * (2 * num_qubits))
    for gate in circuit.instructions():
        tensor = _evolve(tensor, gate.get_matrix(), gate.get_qubits())
    unitary = tensor.reshape(dim, dim)
    if isinstance(circuit, Circuit):
        unitary = unitary * np.exp(1j * np.pi * float(circuit.global_phase))
    return unitary
