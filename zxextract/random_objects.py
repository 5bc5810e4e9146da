"""Random object generator.

This module provides:

- `random_circuit`: Generate a random circuit of H, phase, CNOT and CZ gates.
"""

from __future__ import annotations

from fractions import Fraction
from typing import TYPE_CHECKING

import numpy as np

from zxextract.circuit import Circuit

if TYPE_CHECKING:
    from numpy.random import Generator


def random_circuit(
    num_qubits: int,
    depth: int,
    rng: Generator | None = None,
    *,
    clifford: bool = False,
) -> Circuit:
    r"""Generate a random circuit.

    Every layer holds one gate drawn uniformly from H, Z phase, X phase, CNOT
    and CZ. Phases are multiples of pi/4, or of pi/2 when ``clifford`` is set.

    Parameters
    ----------
    num_qubits : `int`
        The number of qubits.
    depth : `int`
        The number of gates.
    rng : `numpy.random.Generator`, optional
        The random number generator.
        Default is `None`.
    clifford : `bool`, optional
        Restrict phases to Clifford angles.
        Default is `False`.

    Returns
    -------
    `Circuit`
        The generated circuit.
    """
    if rng is None:
        rng = np.random.default_rng()

    circuit = Circuit(num_qubits)
    denominator = 2 if clifford else 4
    kinds = ("h", "phase", "x_phase", "cnot", "cz") if num_qubits > 1 else ("h", "phase", "x_phase")
    for _ in range(depth):
        kind = kinds[int(rng.integers(len(kinds)))]
        if kind in {"cnot", "cz"}:
            qubit1, qubit2 = (int(q) for q in rng.choice(num_qubits, size=2, replace=False))
            if kind == "cnot":
                circuit.cnot(qubit1, qubit2)
            else:
                circuit.cz(qubit1, qubit2)
            continue
        qubit = int(rng.integers(num_qubits))
        if kind == "h":
            circuit.h(qubit)
            continue
        angle = Fraction(int(rng.integers(1, 2 * denominator)), denominator)
        if kind == "phase":
            circuit.phase(qubit, angle)
        else:
            circuit.x_phase(qubit, angle)
    return circuit
