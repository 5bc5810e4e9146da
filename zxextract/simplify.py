"""Rewrite driver.

This module provides:

- `apply_once`: Match a rule once and rewrite every match.
- `simplify_to_fixed_point`: Rewrite with a rule until it no longer matches.
- `clifford_simplification`: Simplify a circuit with local complementation and pivoting and extract it again.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from zxextract.circuit import circuit2graph
from zxextract.rules import LocalComplementRule, PivotBoundaryRule, PivotRule

if TYPE_CHECKING:
    from zxextract.circuit import BaseCircuit, Circuit
    from zxextract.rules import Rule

logger = logging.getLogger(__name__)

TargetT = TypeVar("TargetT")


def apply_once(rule: Rule[TargetT, object], target: TargetT) -> TargetT:
    """Match the rule once and rewrite all the matches found.

    Parameters
    ----------
    rule : `Rule`
        rewrite rule
    target : `TargetT`
        graph or circuit, modified in place

    Returns
    -------
    `TargetT`
        the same target
    """
    matches = rule.match(target)
    logger.debug("%s: %d matches", type(rule).__name__, len(matches))
    rule.rewrite(target, matches)
    return target


def simplify_to_fixed_point(rule: Rule[TargetT, object], target: TargetT) -> TargetT:
    """Rewrite with the rule until no match is left.

    The rule must eventually stop matching; this is not checked.

    Parameters
    ----------
    rule : `Rule`
        rewrite rule
    target : `TargetT`
        graph or circuit, modified in place

    Returns
    -------
    `TargetT`
        the same target
    """
    matches = rule.match(target)
    passes = 0
    while matches:
        rule.rewrite(target, matches)
        passes += 1
        matches = rule.match(target)
    logger.debug("%s: fixed point after %d passes", type(rule).__name__, passes)
    return target


def clifford_simplification(circuit: BaseCircuit) -> Circuit:
    """Simplify a circuit in the ZX-calculus and extract an equivalent circuit.

    The circuit is converted to a graph-like diagram, local complementation and
    pivoting are applied until they no longer match, boundary pivoting is
    applied once and the result is extracted.

    Parameters
    ----------
    circuit : `BaseCircuit`
        circuit to simplify

    Returns
    -------
    `Circuit`
        extracted circuit, equal to the input up to global phase
    """
    # circuit_extraction depends on this module for its cleanup pass
    from zxextract.circuit_extraction import circuit_extraction  # noqa: PLC0415

    graph = circuit2graph(circuit)
    simplify_to_fixed_point(LocalComplementRule(), graph)
    simplify_to_fixed_point(PivotRule(), graph)
    apply_once(PivotBoundaryRule(), graph)
    logger.debug("simplified graph: %d spiders, %d edges", graph.num_spiders, graph.num_edges)
    return circuit_extraction(graph)
