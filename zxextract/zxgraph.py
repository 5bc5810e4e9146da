"""Graph-like ZX-diagram classes.

This module provides:

- `BaseZXGraph`: Abstract base class for ZX-diagram graphs.
- `ZXGraph`: Minimal implementation of a ZX-diagram graph.
- `insert_identity`: Function to insert an identity spider on an edge.
"""

from __future__ import annotations

import abc
import copy
from abc import ABC
from fractions import Fraction
from typing import TYPE_CHECKING

import networkx as nx
import typing_extensions

from zxextract.common import EdgeType, SpiderType, normalize_phase

if TYPE_CHECKING:
    from networkx import Graph as NxGraph

    from zxextract.common import PhaseLike


class BaseZXGraph(ABC):
    """Abstract base class for ZX-diagram graphs."""

    @property
    @abc.abstractmethod
    def spiders(self) -> set[int]:
        r"""Return set of spiders.

        Returns
        -------
        `set`\[`int`\]
            set of spider indices, boundaries included.
        """

    @property
    @abc.abstractmethod
    def edges(self) -> set[tuple[int, int]]:
        r"""Return set of edges.

        Returns
        -------
        `set`\[`tuple`\[`int`, `int`\]\]
            set of edges, each with the smaller index first.
        """

    @property
    @abc.abstractmethod
    def inputs(self) -> list[int]:
        r"""Return input boundary spiders ordered by qubit.

        Returns
        -------
        `list`\[`int`\]
            input spiders
        """

    @property
    @abc.abstractmethod
    def outputs(self) -> list[int]:
        r"""Return output boundary spiders ordered by qubit.

        Returns
        -------
        `list`\[`int`\]
            output spiders
        """

    @abc.abstractmethod
    def add_spider(
        self,
        spider_type: SpiderType,
        phase: PhaseLike = 0,
        qubit: int = -1,
        column: PhaseLike = 0,
    ) -> int:
        """Add a spider to the graph.

        Parameters
        ----------
        spider_type : `SpiderType`
            kind of the spider
        phase : `fractions.Fraction` | `int`, optional
            phase in units of pi, by default 0
        qubit : `int`, optional
            qubit index, by default -1
        column : `fractions.Fraction` | `int`, optional
            column position, by default 0

        Returns
        -------
        `int`
            The spider index internally generated.
        """

    @abc.abstractmethod
    def add_edge(self, node1: int, node2: int, edge_type: EdgeType = EdgeType.HADAMARD) -> None:
        """Add an edge to the graph.

        Parameters
        ----------
        node1 : `int`
            spider index
        node2 : `int`
            spider index
        edge_type : `EdgeType`, optional
            kind of the edge, by default `EdgeType.HADAMARD`
        """

    @abc.abstractmethod
    def remove_spider(self, node: int) -> None:
        """Remove a spider and its incident edges.

        Parameters
        ----------
        node : `int`
            spider index
        """

    @abc.abstractmethod
    def remove_edge(self, node1: int, node2: int) -> None:
        """Remove an edge.

        Parameters
        ----------
        node1 : `int`
            spider index
        node2 : `int`
            spider index
        """

    @abc.abstractmethod
    def neighbors(self, node: int) -> set[int]:
        r"""Return the neighbors of the spider.

        Parameters
        ----------
        node : `int`
            spider index

        Returns
        -------
        `set`\[`int`\]
            set of neighboring spiders
        """

    @abc.abstractmethod
    def edge_type(self, node1: int, node2: int) -> EdgeType:
        """Return the kind of the edge between two spiders.

        Parameters
        ----------
        node1 : `int`
            spider index
        node2 : `int`
            spider index

        Returns
        -------
        `EdgeType`
            kind of the edge
        """

    @abc.abstractmethod
    def spider_type(self, node: int) -> SpiderType:
        """Return the kind of the spider.

        Parameters
        ----------
        node : `int`
            spider index

        Returns
        -------
        `SpiderType`
            kind of the spider
        """

    @abc.abstractmethod
    def phase(self, node: int) -> Fraction:
        """Return the phase of the spider.

        Parameters
        ----------
        node : `int`
            spider index

        Returns
        -------
        `fractions.Fraction`
            phase in units of pi
        """

    @abc.abstractmethod
    def set_phase(self, node: int, phase: PhaseLike) -> None:
        """Set the phase of the spider.

        Parameters
        ----------
        node : `int`
            spider index
        phase : `fractions.Fraction` | `int`
            phase in units of pi
        """

    @abc.abstractmethod
    def qubit(self, node: int) -> int:
        """Return the qubit index of the spider.

        Parameters
        ----------
        node : `int`
            spider index

        Returns
        -------
        `int`
            qubit index
        """

    @abc.abstractmethod
    def column(self, node: int) -> Fraction:
        """Return the column position of the spider.

        Parameters
        ----------
        node : `int`
            spider index

        Returns
        -------
        `fractions.Fraction`
            column position
        """


class ZXGraph(BaseZXGraph):
    """Minimal implementation of a graph-like ZX-diagram.

    Spiders are integer indices handed out by an internal counter, so an index
    is never reused after the spider is removed.

    Parameters
    ----------
    num_qubits : `int`, optional
        declared number of qubits, by default 0 (unknown)
    """

    __spider_types: dict[int, SpiderType]
    __phases: dict[int, Fraction]
    __qubits: dict[int, int]
    __columns: dict[int, Fraction]
    __adjacency: dict[int, dict[int, EdgeType]]
    __num_qubits: int
    __global_phase: Fraction

    __node_counter: int

    def __init__(self, num_qubits: int = 0) -> None:
        if num_qubits < 0:
            msg = f"Number of qubits must be non-negative, got {num_qubits}"
            raise ValueError(msg)
        self.__spider_types = {}
        self.__phases = {}
        self.__qubits = {}
        self.__columns = {}
        self.__adjacency = {}
        self.__num_qubits = num_qubits
        self.__global_phase = Fraction(0)

        self.__node_counter = 0

    @property
    def num_qubits(self) -> int:
        """Return the declared number of qubits.

        Returns
        -------
        `int`
            number of qubits, 0 if unknown
        """
        return self.__num_qubits

    @property
    def global_phase(self) -> Fraction:
        """Return the global phase of the diagram.

        Returns
        -------
        `fractions.Fraction`
            global phase in units of pi
        """
        return self.__global_phase

    @global_phase.setter
    def global_phase(self, phase: PhaseLike) -> None:
        self.__global_phase = normalize_phase(phase)

    @property
    @typing_extensions.override
    def spiders(self) -> set[int]:
        r"""Return set of spiders.

        Returns
        -------
        `set`\[`int`\]
            set of spider indices, boundaries included.
        """
        return set(self.__spider_types)

    @property
    @typing_extensions.override
    def edges(self) -> set[tuple[int, int]]:
        r"""Return set of edges.

        Returns
        -------
        `set`\[`tuple`\[`int`, `int`\]\]
            set of edges, each with the smaller index first.
        """
        edges: set[tuple[int, int]] = set()
        for node1, nbrs in self.__adjacency.items():
            for node2 in nbrs:
                if node1 < node2:
                    edges |= {(node1, node2)}
        return edges

    @property
    def num_spiders(self) -> int:
        """Return the number of spiders."""
        return len(self.__spider_types)

    @property
    def num_edges(self) -> int:
        """Return the number of edges."""
        return sum(len(nbrs) for nbrs in self.__adjacency.values()) // 2

    @property
    @typing_extensions.override
    def inputs(self) -> list[int]:
        r"""Return input boundary spiders ordered by qubit.

        Returns
        -------
        `list`\[`int`\]
            input spiders
        """
        return self._boundaries(SpiderType.IN)

    @property
    @typing_extensions.override
    def outputs(self) -> list[int]:
        r"""Return output boundary spiders ordered by qubit.

        Returns
        -------
        `list`\[`int`\]
            output spiders
        """
        return self._boundaries(SpiderType.OUT)

    def _boundaries(self, spider_type: SpiderType) -> list[int]:
        nodes = [node for node, st in self.__spider_types.items() if st == spider_type]
        return sorted(nodes, key=lambda node: (self.__qubits[node], node))

    def _ensure_node_exists(self, node: int) -> None:
        """Ensure that the spider exists in the graph.

        Raises
        ------
        ValueError
            If the spider does not exist in the graph.
        """
        if node not in self.__spider_types:
            msg = f"Node does not exist {node=}"
            raise ValueError(msg)

    @typing_extensions.override
    def add_spider(
        self,
        spider_type: SpiderType,
        phase: PhaseLike = 0,
        qubit: int = -1,
        column: PhaseLike = 0,
    ) -> int:
        """Add a spider to the graph.

        Parameters
        ----------
        spider_type : `SpiderType`
            kind of the spider
        phase : `fractions.Fraction` | `int`, optional
            phase in units of pi, by default 0
        qubit : `int`, optional
            qubit index, by default -1
        column : `fractions.Fraction` | `int`, optional
            column position, by default 0

        Returns
        -------
        `int`
            The spider index internally generated.

        Raises
        ------
        ValueError
            If a boundary spider is given a nonzero phase.
        """
        phase = normalize_phase(phase)
        if spider_type.is_boundary and phase != 0:
            msg = f"Boundary spiders cannot carry a phase, got {phase}"
            raise ValueError(msg)
        node = self.__node_counter
        self.__spider_types[node] = spider_type
        self.__phases[node] = phase
        self.__qubits[node] = qubit
        self.__columns[node] = Fraction(column)
        self.__adjacency[node] = {}
        self.__node_counter += 1

        return node

    @typing_extensions.override
    def add_edge(self, node1: int, node2: int, edge_type: EdgeType = EdgeType.HADAMARD) -> None:
        """Add an edge to the graph.

        Parameters
        ----------
        node1 : `int`
            spider index
        node2 : `int`
            spider index
        edge_type : `EdgeType`, optional
            kind of the edge, by default `EdgeType.HADAMARD`

        Raises
        ------
        ValueError
            1. If the spider does not exist.
            2. If the edge already exists.
            3. If the edge is a self-loop.
        """
        self._ensure_node_exists(node1)
        self._ensure_node_exists(node2)
        if node1 == node2:
            msg = "Self-loops are not allowed"
            raise ValueError(msg)
        if node2 in self.__adjacency[node1]:
            msg = f"Edge already exists {node1=}, {node2=}"
            raise ValueError(msg)
        self.__adjacency[node1][node2] = edge_type
        self.__adjacency[node2][node1] = edge_type

    @typing_extensions.override
    def remove_spider(self, node: int) -> None:
        """Remove a spider and its incident edges.

        Parameters
        ----------
        node : `int`
            spider index
        """
        self._ensure_node_exists(node)
        for neighbor in self.__adjacency[node]:
            del self.__adjacency[neighbor][node]
        del self.__adjacency[node]
        del self.__spider_types[node]
        del self.__phases[node]
        del self.__qubits[node]
        del self.__columns[node]

    @typing_extensions.override
    def remove_edge(self, node1: int, node2: int) -> None:
        """Remove an edge.

        Parameters
        ----------
        node1 : `int`
            spider index
        node2 : `int`
            spider index

        Raises
        ------
        ValueError
            If the edge does not exist.
        """
        if not self.has_edge(node1, node2):
            msg = f"Edge does not exist {node1=}, {node2=}"
            raise ValueError(msg)
        del self.__adjacency[node1][node2]
        del self.__adjacency[node2][node1]

    def toggle_hadamard_edge(self, node1: int, node2: int) -> None:
        """Add a Hadamard edge, or remove it if it is already there.

        Two parallel Hadamard edges between Z spiders cancel, so toggling is
        how graph-like rewrites complement a neighbourhood.

        Parameters
        ----------
        node1 : `int`
            spider index
        node2 : `int`
            spider index

        Raises
        ------
        ValueError
            If the spiders are joined by a simple edge.
        """
        if not self.has_edge(node1, node2):
            self.add_edge(node1, node2, EdgeType.HADAMARD)
        elif self.is_hadamard(node1, node2):
            self.remove_edge(node1, node2)
        else:
            msg = f"Cannot toggle a simple edge {node1=}, {node2=}"
            raise ValueError(msg)

    def has_edge(self, node1: int, node2: int) -> bool:
        """Return whether two spiders are adjacent."""
        self._ensure_node_exists(node1)
        self._ensure_node_exists(node2)
        return node2 in self.__adjacency[node1]

    @typing_extensions.override
    def edge_type(self, node1: int, node2: int) -> EdgeType:
        """Return the kind of the edge between two spiders.

        Parameters
        ----------
        node1 : `int`
            spider index
        node2 : `int`
            spider index

        Returns
        -------
        `EdgeType`
            kind of the edge

        Raises
        ------
        ValueError
            If the edge does not exist.
        """
        if not self.has_edge(node1, node2):
            msg = f"Edge does not exist {node1=}, {node2=}"
            raise ValueError(msg)
        return self.__adjacency[node1][node2]

    def is_hadamard(self, node1: int, node2: int) -> bool:
        """Return whether the edge between two spiders is a Hadamard edge."""
        return self.edge_type(node1, node2) == EdgeType.HADAMARD

    @typing_extensions.override
    def neighbors(self, node: int) -> set[int]:
        r"""Return the neighbors of the spider.

        Parameters
        ----------
        node : `int`
            spider index

        Returns
        -------
        `set`\[`int`\]
            set of neighboring spiders
        """
        self._ensure_node_exists(node)
        return set(self.__adjacency[node])

    def degree(self, node: int) -> int:
        """Return the number of edges incident to the spider."""
        self._ensure_node_exists(node)
        return len(self.__adjacency[node])

    @typing_extensions.override
    def spider_type(self, node: int) -> SpiderType:
        """Return the kind of the spider.

        Parameters
        ----------
        node : `int`
            spider index

        Returns
        -------
        `SpiderType`
            kind of the spider
        """
        self._ensure_node_exists(node)
        return self.__spider_types[node]

    @typing_extensions.override
    def phase(self, node: int) -> Fraction:
        """Return the phase of the spider.

        Parameters
        ----------
        node : `int`
            spider index

        Returns
        -------
        `fractions.Fraction`
            phase in units of pi
        """
        self._ensure_node_exists(node)
        return self.__phases[node]

    @typing_extensions.override
    def set_phase(self, node: int, phase: PhaseLike) -> None:
        """Set the phase of the spider.

        Parameters
        ----------
        node : `int`
            spider index
        phase : `fractions.Fraction` | `int`
            phase in units of pi

        Raises
        ------
        ValueError
            If a nonzero phase is set on a boundary spider.
        """
        self._ensure_node_exists(node)
        phase = normalize_phase(phase)
        if self.__spider_types[node].is_boundary and phase != 0:
            msg = f"Boundary spiders cannot carry a phase {node=}"
            raise ValueError(msg)
        self.__phases[node] = phase

    def add_to_phase(self, node: int, phase: PhaseLike) -> None:
        """Add to the phase of the spider."""
        self.set_phase(node, self.phase(node) + normalize_phase(phase))

    @typing_extensions.override
    def qubit(self, node: int) -> int:
        """Return the qubit index of the spider.

        Parameters
        ----------
        node : `int`
            spider index

        Returns
        -------
        `int`
            qubit index
        """
        self._ensure_node_exists(node)
        return self.__qubits[node]

    @typing_extensions.override
    def column(self, node: int) -> Fraction:
        """Return the column position of the spider.

        Parameters
        ----------
        node : `int`
            spider index

        Returns
        -------
        `fractions.Fraction`
            column position
        """
        self._ensure_node_exists(node)
        return self.__columns[node]

    def set_location(self, node: int, qubit: int, column: PhaseLike) -> None:
        """Move the spider to a qubit and column.

        Parameters
        ----------
        node : `int`
            spider index
        qubit : `int`
            qubit index
        column : `fractions.Fraction` | `int`
            column position
        """
        self._ensure_node_exists(node)
        self.__qubits[node] = qubit
        self.__columns[node] = Fraction(column)

    def set_column(self, node: int, column: PhaseLike) -> None:
        """Move the spider to another column on its qubit."""
        self._ensure_node_exists(node)
        self.__columns[node] = Fraction(column)

    def copy(self) -> ZXGraph:
        """Return an independent copy of the graph.

        Returns
        -------
        `ZXGraph`
            copied graph; spider indices are preserved.
        """
        return copy.deepcopy(self)

    def to_networkx(self) -> NxGraph[int]:
        """Export the graph to networkx.

        Spider attributes are stored as ``spider_type``, ``phase``, ``qubit``
        and ``column``; edges carry ``edge_type``.

        Returns
        -------
        `networkx.Graph`
            exported graph
        """
        graph: NxGraph[int] = nx.Graph()
        for node in sorted(self.__spider_types):
            graph.add_node(
                node,
                spider_type=self.__spider_types[node],
                phase=self.__phases[node],
                qubit=self.__qubits[node],
                column=self.__columns[node],
            )
        for node1, node2 in sorted(self.edges):
            graph.add_edge(node1, node2, edge_type=self.__adjacency[node1][node2])
        return graph


def insert_identity(graph: ZXGraph, node1: int, node2: int) -> int:
    """Insert a phase-free Z spider on the edge between two spiders.

    The new spider is joined to ``node1`` by a Hadamard edge. The edge towards
    ``node2`` gets the opposite kind of the original edge so the two
    Hadamards cancel where needed and the diagram is unchanged.

    Parameters
    ----------
    graph : `ZXGraph`
        graph to modify
    node1 : `int`
        spider index
    node2 : `int`
        spider index

    Returns
    -------
    `int`
        index of the inserted spider
    """
    old_type = graph.edge_type(node1, node2)
    graph.remove_edge(node1, node2)
    qubit = graph.qubit(node1) if graph.spider_type(node1).is_boundary else graph.qubit(node2)
    column = (graph.column(node1) + graph.column(node2)) / 2
    new_node = graph.add_spider(SpiderType.Z, qubit=qubit, column=column)
    graph.add_edge(node1, new_node, EdgeType.HADAMARD)
    if old_type == EdgeType.HADAMARD:
        graph.add_edge(new_node, node2, EdgeType.SIMPLE)
    else:
        graph.add_edge(new_node, node2, EdgeType.HADAMARD)
    return new_node
