"""Common classes and functions.

This module provides:

- `SpiderType`: Kinds of vertices in a ZX-diagram.
- `EdgeType`: Kinds of edges in a ZX-diagram.
- `PhaseLike`: Type alias for values accepted as exact phases.
- `normalize_phase`: Function to bring a phase into the range [0, 2).
- `is_pauli_phase`: Function to check if a phase is 0 or pi.
- `is_proper_clifford_phase`: Function to check if a phase is pi/2 or 3pi/2.
"""

from __future__ import annotations

import sys
from enum import Enum, auto
from fractions import Fraction
from typing import Union

if sys.version_info >= (3, 10):
    from typing import TypeAlias
else:
    from typing_extensions import TypeAlias

PhaseLike: TypeAlias = Union[Fraction, int]


class SpiderType(Enum):
    """Kinds of vertices in a ZX-diagram.

    Only Z and X spiders carry a phase. IN and OUT are the boundary vertices
    marking the wire ends of the diagram.
    """

    Z = auto()
    X = auto()
    IN = auto()
    OUT = auto()

    @property
    def is_boundary(self) -> bool:
        """Return whether the spider type is a boundary type.

        Returns
        -------
        `bool`
            `True` for IN and OUT
        """
        return self in {SpiderType.IN, SpiderType.OUT}


class EdgeType(Enum):
    """Kinds of edges in a ZX-diagram."""

    SIMPLE = auto()
    HADAMARD = auto()


def normalize_phase(phase: PhaseLike) -> Fraction:
    """Bring a phase into the range [0, 2).

    Phases are exact rational multiples of pi, so ``Fraction(1, 2)`` is pi/2.

    Parameters
    ----------
    phase : `fractions.Fraction` | `int`
        phase in units of pi

    Returns
    -------
    `fractions.Fraction`
        normalized phase

    Raises
    ------
    TypeError
        If the phase is not an exact rational.
    """
    if isinstance(phase, bool) or not isinstance(phase, (Fraction, int)):
        msg = f"Phase must be an exact rational, got {phase!r}"
        raise TypeError(msg)
    return Fraction(phase) % 2


def is_pauli_phase(phase: PhaseLike) -> bool:
    """Check if the phase is 0 or pi.

    Parameters
    ----------
    phase : `fractions.Fraction` | `int`
        phase in units of pi

    Returns
    -------
    `bool`
        `True` if the phase is a Pauli phase
    """
    return normalize_phase(phase) in {0, 1}


def is_proper_clifford_phase(phase: PhaseLike) -> bool:
    """Check if the phase is pi/2 or 3pi/2."""
    return normalize_phase(phase) in {Fraction(1, 2), Fraction(3, 2)}
