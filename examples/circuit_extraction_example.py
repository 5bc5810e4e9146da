"""
Extracting a circuit from a simplified ZX-diagram
=================================================

This example converts a circuit into a graph-like ZX-diagram, removes
interior Clifford spiders with local complementation and pivoting, and
extracts an equivalent circuit again.
"""

# %%

from __future__ import annotations

import logging
from fractions import Fraction

import numpy as np

from zxextract.circuit import Circuit, circuit2graph
from zxextract.circuit_extraction import circuit_extraction
from zxextract.matrix import is_equal_up_to_global_phase
from zxextract.random_objects import random_circuit
from zxextract.rules import LocalComplementRule, PivotBoundaryRule, PivotRule
from zxextract.simplify import apply_once, clifford_simplification, simplify_to_fixed_point
from zxextract.simulator import circuit_unitary

logging.basicConfig(level=logging.INFO)

# %%
# Build a small circuit by hand
circuit = Circuit(num_qubits=3)
circuit.h(0)
circuit.cnot(0, 1)
circuit.phase(1, Fraction(1, 4))
circuit.cz(1, 2)
circuit.x_phase(2, Fraction(1, 2))
circuit.cnot(2, 0)

graph = circuit2graph(circuit)
print(f"Diagram has {graph.num_spiders} spiders and {graph.num_edges} edges")

# %%
# Simplify the diagram step by step
simplify_to_fixed_point(LocalComplementRule(), graph)
simplify_to_fixed_point(PivotRule(), graph)
apply_once(PivotBoundaryRule(), graph)
print(f"Simplified diagram has {graph.num_spiders} spiders and {graph.num_edges} edges")

# %%
# Extract the circuit and compare the unitaries
extracted = circuit_extraction(graph)
for i, gate in enumerate(extracted.instructions()):
    print(f"  {i}: {gate}")
print("Equal up to global phase:", is_equal_up_to_global_phase(circuit_unitary(extracted), circuit_unitary(circuit)))

# %%
# The same pipeline is available as a single call
rng = np.random.default_rng(0)
random_circ = random_circuit(num_qubits=4, depth=60, rng=rng, clifford=True)
simplified = clifford_simplification(random_circ)
print(f"Random circuit: {random_circ.num_gates} gates, extracted: {simplified.num_gates} gates")
print("Equal up to global phase:", is_equal_up_to_global_phase(circuit_unitary(simplified), circuit_unitary(random_circ)))
