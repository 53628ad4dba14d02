"""
Grid heuristics for A*.

Each factory takes the goal cell and returns a Node -> float callable for
(x, y) tuple nodes. All of them are admissible and consistent for the move
set they are named after:
- manhattan: 4-connected grids, unit moves
- octile: 8-connected grids, unit cardinal and sqrt(2) diagonal moves
- euclidean: any grid (weaker than octile on 8-connected grids)
"""

import math
from typing import Any, Callable, Tuple

Heuristic = Callable[[Any], float]

SQRT2 = math.sqrt(2)


def zero(node) -> float:
    """Uniform-cost search (Dijkstra)."""
    return 0.0


def manhattan(goal: Tuple[float, float]) -> Heuristic:
    gx, gy = goal

    def h(node) -> float:
        x, y = node
        return abs(gx - x) + abs(gy - y)
    return h


def euclidean(goal: Tuple[float, float]) -> Heuristic:
    gx, gy = goal

    def h(node) -> float:
        x, y = node
        return math.hypot(gx - x, gy - y)
    return h


def octile(goal: Tuple[float, float]) -> Heuristic:
    gx, gy = goal

    def h(node) -> float:
        x, y = node
        dx = abs(gx - x)
        dy = abs(gy - y)
        return max(dx, dy) + (SQRT2 - 1.0) * min(dx, dy)
    return h


def weighted(heuristic: Heuristic, weight: float) -> Heuristic:
    """Scale a heuristic. weight > 1 trades optimality for fewer expansions."""
    def h(node) -> float:
        return weight * heuristic(node)
    return h
