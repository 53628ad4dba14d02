"""
Planning module: generic A* search and grid path planning.

Components:
- Graph, ImplicitGraph, DirectedEdge: capabilities the search needs
- SimpleGraph: explicit adjacency graph
- GridGraph: implicit 4/8-connected obstacle grid
- Frontier: open set with insert-or-improve
- AStarSearch / search: the search driver
- GridPlanner: A* on an occupancy map in world coordinates
"""

from .graph import DirectedEdge, Edge, ImplicitGraph, Graph, SimpleGraph, GridGraph
from .frontier import Frontier, Priority, InsertResult
from .astar import (
    AStarSearch,
    SearchConfig,
    SearchResult,
    SearchStatus,
    SearchInvariantError,
    search,
    reconstruct_path,
    path_cost,
)
from .grid_planner import GridPlanner, PlannerConfig, inflate_obstacles, simplify_path

__all__ = [
    # Graph abstraction
    'DirectedEdge',
    'Edge',
    'ImplicitGraph',
    'Graph',
    'SimpleGraph',
    'GridGraph',

    # Frontier
    'Frontier',
    'Priority',
    'InsertResult',

    # Search
    'AStarSearch',
    'SearchConfig',
    'SearchResult',
    'SearchStatus',
    'SearchInvariantError',
    'search',
    'reconstruct_path',
    'path_cost',

    # Grid planning
    'GridPlanner',
    'PlannerConfig',
    'inflate_obstacles',
    'simplify_path',
]
