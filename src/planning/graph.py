"""
Graph Abstraction

Capabilities consumed by the A* search driver:
- DirectedEdge: an edge knows its endpoints and its cost
- ImplicitGraph: outgoing edges of a node, computed lazily
- Graph: an implicit graph whose (finite) node set can be enumerated

Implementations:
- SimpleGraph: explicit adjacency graph over a fixed list of nodes
- GridGraph: implicit 4/8-connected graph over an obstacle grid

Edge costs must be non-negative. This is a caller obligation and is not
checked: a negative cost only costs optimality, it never crashes a search.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterable, List, Tuple

import numpy as np


class DirectedEdge(ABC):
    """A directed, weighted edge."""

    @abstractmethod
    def from_node(self) -> Hashable:
        """Source node."""
        pass

    @abstractmethod
    def to_node(self) -> Hashable:
        """Destination node."""
        pass

    @abstractmethod
    def cost(self) -> float:
        """Traversal cost (>= 0)."""
        pass


@dataclass(frozen=True)
class Edge(DirectedEdge):
    """Plain edge record."""
    source: Any
    target: Any
    weight: float = 1.0

    def from_node(self):
        return self.source

    def to_node(self):
        return self.target

    def cost(self) -> float:
        return self.weight


class ImplicitGraph(ABC):
    """
    Graph known only through its edges, potentially with infinitely many nodes.

    The search never asks for the full node set, so this is all it needs.
    """

    @abstractmethod
    def edges(self, node) -> List[DirectedEdge]:
        """Outgoing edges of a node."""
        pass

    def endpoints(self, edge: DirectedEdge) -> Tuple[Any, Any]:
        """(source, destination) of an edge."""
        return edge.from_node(), edge.to_node()


class Graph(ImplicitGraph):
    """Explicit graph with a finite, enumerable node set."""

    @abstractmethod
    def nodes(self) -> List[Any]:
        """All nodes of the graph."""
        pass


class SimpleGraph(Graph):
    """
    Adjacency graph over a fixed set of nodes.

    Nodes are indexed once at construction; edges are stored per source
    node in insertion order, so iteration (and therefore search output) is
    deterministic.

    Usage:
        graph = SimpleGraph(['A', 'B', 'C'])
        graph.add_edge('A', 'B', 1.0)
        graph.add_edge('B', 'C', 1.0)

        graph.edges('A')    # [Edge('A', 'B', 1.0)]
    """

    def __init__(self, nodes: Iterable[Hashable]):
        self._nodes: List[Hashable] = []
        self._node_index: Dict[Hashable, int] = {}
        for node in nodes:
            if node not in self._node_index:
                self._node_index[node] = len(self._nodes)
                self._nodes.append(node)

        # One {destination index: Edge} dict per node
        self._edges: List[Dict[int, Edge]] = [{} for _ in self._nodes]

    def _index(self, node) -> int:
        try:
            return self._node_index[node]
        except KeyError:
            raise KeyError(f"Unknown node: {node!r}") from None

    def add_edge(self, source, target, cost: float = 1.0) -> Edge:
        """
        Add a directed edge, replacing the cost of an existing source->target edge.

        Args:
            source: Source node (must be in the graph)
            target: Destination node (must be in the graph)
            cost: Traversal cost (not validated)

        Returns:
            The stored edge
        """
        src = self._index(source)
        dst = self._index(target)
        edge = Edge(self._nodes[src], self._nodes[dst], float(cost))
        self._edges[src][dst] = edge
        return edge

    def add_undirected_edge(self, a, b, cost: float = 1.0):
        """Add a->b and b->a with the same cost."""
        self.add_edge(a, b, cost)
        self.add_edge(b, a, cost)

    def remove_edge(self, source, target) -> bool:
        """Remove source->target. Returns whether an edge was removed."""
        src = self._index(source)
        dst = self._index(target)
        return self._edges[src].pop(dst, None) is not None

    def has_node(self, node) -> bool:
        return node in self._node_index

    def nodes(self) -> List[Any]:
        return list(self._nodes)

    def edges(self, node) -> List[Edge]:
        return list(self._edges[self._index(node)].values())

    @property
    def num_edges(self) -> int:
        return sum(len(adjacent) for adjacent in self._edges)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node) -> bool:
        return self.has_node(node)

    def __repr__(self) -> str:
        return f"SimpleGraph(nodes={len(self)}, edges={self.num_edges})"


class GridGraph(ImplicitGraph):
    """
    Implicit graph over a 2D obstacle grid.

    Nodes are (x, y) cell tuples; the grid is indexed [y, x] (row-major,
    like an image) with True marking an obstacle. Blocked cells have no
    outgoing edges and are never reached.

    Diagonal moves cost sqrt(2) and are only allowed when both adjacent
    cardinal cells are free (no corner cutting).
    """

    # (dx, dy, cost)
    DIRECTIONS_4 = [
        (1, 0, 1.0), (-1, 0, 1.0), (0, 1, 1.0), (0, -1, 1.0)
    ]

    DIRECTIONS_8 = DIRECTIONS_4 + [
        (1, 1, math.sqrt(2)), (-1, 1, math.sqrt(2)),
        (1, -1, math.sqrt(2)), (-1, -1, math.sqrt(2))
    ]

    def __init__(self, obstacles: np.ndarray, allow_diagonal: bool = True):
        """
        Args:
            obstacles: 2D boolean array (True = blocked), indexed [y, x]
            allow_diagonal: Use 8-connected moves instead of 4-connected
        """
        obstacles = np.asarray(obstacles, dtype=bool)
        if obstacles.ndim != 2:
            raise ValueError(f"Obstacle grid must be 2D, got shape {obstacles.shape}")
        self.obstacles = obstacles
        self.height, self.width = obstacles.shape
        self.allow_diagonal = allow_diagonal

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_free(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and not self.obstacles[y, x]

    def edges(self, node) -> List[Edge]:
        x, y = node
        if not self.is_free(x, y):
            return []

        directions = self.DIRECTIONS_8 if self.allow_diagonal else self.DIRECTIONS_4
        result = []
        for dx, dy, cost in directions:
            nx, ny = x + dx, y + dy
            if not self.is_free(nx, ny):
                continue
            # Diagonal: both adjacent cells must be free
            if dx != 0 and dy != 0:
                if not (self.is_free(x + dx, y) and self.is_free(x, y + dy)):
                    continue
            result.append(Edge((x, y), (nx, ny), cost))
        return result
