"""
A* Search

Best-first shortest-path search over any ImplicitGraph with non-negative
edge costs and a caller-supplied heuristic.

Node lifecycle during one search:
    Unvisited -> Frontier(tentative g) -> Closed(finalized g)

A node moves to Closed exactly once, when it is popped from the frontier,
and never re-enters the frontier afterwards.

The heuristic is assumed admissible and consistent. Nothing checks this:
a bad heuristic gives a suboptimal path, not an error.

References:
- Hart, Nilsson, Raphael: "A Formal Basis for the Heuristic Determination
  of Minimum Cost Paths" (1968)
- Red Blob Games A* tutorial: https://www.redblobgames.com/pathfinding/a-star/
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence

from .frontier import Frontier, Priority
from .graph import ImplicitGraph

logger = logging.getLogger(__name__)

Heuristic = Callable[[Any], float]


class SearchInvariantError(RuntimeError):
    """The search state is inconsistent. Indicates a bug, not bad input."""


class SearchStatus(Enum):
    """How a search ended."""
    FOUND = 1       # goal closed, path available
    NO_PATH = 2     # frontier exhausted
    ABORTED = 3     # expansion or time limit hit


@dataclass
class SearchConfig:
    """A* limits and tuning."""
    max_expansions: Optional[int] = None    # None = unbounded
    timeout: Optional[float] = None         # seconds, None = unbounded
    heuristic_weight: float = 1.0           # >1 = faster but possibly suboptimal


@dataclass
class SearchResult:
    """Outcome of one search."""
    status: SearchStatus
    path: Optional[List[Any]] = None
    cost: float = float('inf')
    expanded: int = 0                       # nodes closed
    elapsed: float = 0.0                    # seconds

    @property
    def found(self) -> bool:
        return self.status == SearchStatus.FOUND


def reconstruct_path(predecessors: Dict[Hashable, Hashable], goal,
                     start=None) -> List[Any]:
    """
    Walk the predecessor map back from goal and return start..goal.

    Args:
        predecessors: node -> previous hop on the cheapest known path
        goal: Last node of the path
        start: Expected first node; checked when given

    Raises:
        SearchInvariantError: the chain loops, or does not end at start
    """
    path = [goal]
    seen = {goal}
    current = goal
    while current in predecessors:
        current = predecessors[current]
        if current in seen:
            raise SearchInvariantError(
                f"Predecessor chain from {goal!r} loops at {current!r}")
        seen.add(current)
        path.append(current)

    if start is not None and path[-1] != start:
        raise SearchInvariantError(
            f"Predecessor chain from {goal!r} ends at {path[-1]!r}, not at start {start!r}")

    path.reverse()
    return path


class AStarSearch:
    """
    Offline A* search driver.

    One instance can run any number of searches on the same graph; all
    per-search state (frontier, closed set, predecessors) is created in
    run() and dropped when it returns.

    Usage:
        astar = AStarSearch(graph, heuristic=lambda n: 0.0)

        result = astar.run(start='A', goal='C')
        if result.found:
            print(result.path, result.cost)
    """

    def __init__(self, graph: ImplicitGraph,
                 heuristic: Optional[Heuristic] = None,
                 config: Optional[SearchConfig] = None):
        self.graph = graph
        self.heuristic = heuristic or (lambda node: 0.0)
        self.config = config or SearchConfig()

    def _h(self, node) -> float:
        return self.config.heuristic_weight * self.heuristic(node)

    def _limit_reached(self, expanded: int, started: float) -> bool:
        cfg = self.config
        if cfg.max_expansions is not None and expanded >= cfg.max_expansions:
            return True
        if cfg.timeout is not None and time.monotonic() - started >= cfg.timeout:
            return True
        return False

    def run(self, start, goal) -> SearchResult:
        """
        Search for the cheapest path from start to goal.

        Returns:
            SearchResult with status FOUND, NO_PATH or ABORTED
        """
        started = time.monotonic()

        predecessors: Dict[Hashable, Hashable] = {}
        closed = set()
        frontier = Frontier()
        frontier.insert_or_improve(start, Priority(self._h(start), 0.0))

        expanded = 0
        while True:
            if self._limit_reached(expanded, started):
                logger.debug("A* aborted after %d expansions", expanded)
                return SearchResult(SearchStatus.ABORTED, expanded=expanded,
                                    elapsed=time.monotonic() - started)

            popped = frontier.pop_min()
            if popped is None:
                logger.debug("A* exhausted frontier after %d expansions, no path %r -> %r",
                             expanded, start, goal)
                return SearchResult(SearchStatus.NO_PATH, expanded=expanded,
                                    elapsed=time.monotonic() - started)

            current, (_, g_current) = popped
            if current == goal:
                path = reconstruct_path(predecessors, goal, start)
                logger.debug("A* found path of %d nodes, cost %.3f, %d expansions",
                             len(path), g_current, expanded)
                return SearchResult(SearchStatus.FOUND, path=path, cost=g_current,
                                    expanded=expanded,
                                    elapsed=time.monotonic() - started)

            # Closed before relaxing so a self-loop cannot re-open it
            closed.add(current)
            expanded += 1

            for edge in self.graph.edges(current):
                _, neighbor = self.graph.endpoints(edge)
                if neighbor in closed:
                    continue

                g_next = g_current + edge.cost()
                f_next = g_next + self._h(neighbor)
                result = frontier.insert_or_improve(neighbor, Priority(f_next, g_next))

                # New node, or the losing g is not ours: g_next is the new best
                if result.discarded is None or result.discarded.g != g_next:
                    predecessors[neighbor] = current


def search(graph: ImplicitGraph, start, goal,
           heuristic: Optional[Heuristic] = None) -> Optional[List[Any]]:
    """
    Cheapest path from start to goal, or None if the goal is unreachable.

    Args:
        graph: Graph to search (read-only for the duration of the call)
        start: Start node
        goal: Goal node
        heuristic: Node -> estimated remaining cost (default: 0)

    Returns:
        [start, ..., goal], or None
    """
    return AStarSearch(graph, heuristic).run(start, goal).path


def path_cost(graph: ImplicitGraph, path: Sequence[Any]) -> float:
    """
    Total cost of a path, taking the cheapest edge between consecutive nodes.

    Raises:
        ValueError: two consecutive nodes are not connected
    """
    total = 0.0
    for a, b in zip(path, path[1:]):
        costs = [edge.cost() for edge in graph.edges(a)
                 if graph.endpoints(edge)[1] == b]
        if not costs:
            raise ValueError(f"No edge {a!r} -> {b!r}")
        total += min(costs)
    return total
