"""
Global Path Planner - A* on an occupancy grid

Finds the shortest collision-free path from A to B on a binary obstacle
map, in world coordinates (meters).

Pipeline:
1. Inflate obstacles by robot radius + safety margin
2. Convert start/goal to map cells and validate them
3. Run the generic A* search over a GridGraph
4. Convert back to world coordinates and smooth

References:
- Red Blob Games A* tutorial: https://www.redblobgames.com/pathfinding/a-star/
- Nav2 NavFn Planner (ROS2 uses this same approach)
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .astar import AStarSearch, SearchConfig, SearchResult, SearchStatus
from .graph import GridGraph
from .heuristics import manhattan, octile

logger = logging.getLogger(__name__)


@dataclass
class PlannerConfig:
    """Global planner configuration."""
    # Robot dimensions
    robot_radius: float = 0.15          # meters
    safety_margin: float = 0.10         # extra margin around obstacles

    # A* parameters
    allow_diagonal: bool = True         # Allow 8-directional movement
    heuristic_weight: float = 1.0       # >1 = faster but slightly suboptimal
    max_expansions: Optional[int] = None  # None = whole map

    # Path smoothing
    smooth_path: bool = True
    smooth_weight_data: float = 0.1     # How close to stay to original
    smooth_weight_smooth: float = 0.3   # How smooth to make path


def inflate_obstacles(obstacles: np.ndarray, radius_cells: int) -> np.ndarray:
    """
    Grow every obstacle cell by a disc of radius_cells.

    Args:
        obstacles: 2D boolean array (True = blocked)
        radius_cells: Inflation radius in cells (0 = no change)

    Returns:
        New boolean array
    """
    obstacles = np.asarray(obstacles, dtype=bool)
    if radius_cells <= 0:
        return obstacles.copy()

    inflated = obstacles.copy()
    h, w = obstacles.shape
    r = radius_cells
    for dy in range(-r, r + 1):
        for dx in range(-r, r + 1):
            if dx * dx + dy * dy > r * r:
                continue
            # Shift moves the whole mask off the map
            if abs(dy) >= h or abs(dx) >= w:
                continue
            # Shift the obstacle mask by (dx, dy) without wrapping
            src = obstacles[max(0, -dy):h - max(0, dy), max(0, -dx):w - max(0, dx)]
            inflated[max(0, dy):h - max(0, -dy), max(0, dx):w - max(0, -dx)] |= src
    return inflated


class GridPlanner:
    """
    A* global path planner on a binary occupancy map.

    Usage:
        planner = GridPlanner()
        planner.set_map_array(obstacles, resolution=0.1, origin_x=-10, origin_y=-10)

        path = planner.plan(start=(0, 0), goal=(5, 3))
        # path = [(0.05, 0.05), (0.15, 0.15), ..., (5.05, 3.05)]
    """

    def __init__(self, config: Optional[PlannerConfig] = None):
        self.config = config or PlannerConfig()
        self._inflated_map: Optional[np.ndarray] = None
        self._map_resolution: float = 0.05
        self._map_origin_x: float = 0.0
        self._map_origin_y: float = 0.0
        self._map_width: int = 0
        self._map_height: int = 0
        self.last_result: Optional[SearchResult] = None

    def set_map_array(self, binary_map: np.ndarray, resolution: float,
                      origin_x: float = 0.0, origin_y: float = 0.0,
                      inflate: bool = True):
        """
        Set the map for planning.

        Args:
            binary_map: 2D boolean array indexed [y, x] (True = obstacle)
            resolution: Meters per cell
            origin_x, origin_y: World coordinates of cell (0, 0)
            inflate: Whether to inflate obstacles by robot radius + margin
        """
        binary_map = np.asarray(binary_map, dtype=bool)
        if binary_map.ndim != 2:
            raise ValueError(f"Map must be 2D, got shape {binary_map.shape}")
        if resolution <= 0:
            raise ValueError(f"Resolution must be positive, got {resolution}")

        self._map_resolution = resolution
        self._map_origin_x = origin_x
        self._map_origin_y = origin_y
        self._map_height, self._map_width = binary_map.shape

        if inflate:
            radius = self.config.robot_radius + self.config.safety_margin
            binary_map = inflate_obstacles(binary_map, int(math.ceil(radius / resolution)))
        self._inflated_map = binary_map

    @property
    def inflated_map(self) -> Optional[np.ndarray]:
        return self._inflated_map

    def plan(self, start: Tuple[float, float],
             goal: Tuple[float, float]) -> Optional[List[Tuple[float, float]]]:
        """
        Plan path from start to goal in world coordinates.

        Args:
            start: (x, y) start position in meters
            goal: (x, y) goal position in meters

        Returns:
            List of (x, y) waypoints in meters, or None if no path found
        """
        if self._inflated_map is None:
            raise RuntimeError("No map set. Call set_map_array() first.")

        start_cell = self._world_to_map(start[0], start[1])
        goal_cell = self._world_to_map(goal[0], goal[1])

        if not self._cell_ok(start_cell, "Start", start):
            return None
        if not self._cell_ok(goal_cell, "Goal", goal):
            return None

        map_path = self.plan_cells(start_cell, goal_cell)
        if map_path is None:
            if self.last_result.status == SearchStatus.ABORTED:
                logger.warning("Search aborted after %d expansions (%s -> %s)",
                               self.last_result.expanded, start, goal)
            else:
                logger.warning("No path found from %s to %s", start, goal)
            return None

        world_path = [self._map_to_world(mx, my) for mx, my in map_path]

        if self.config.smooth_path and len(world_path) > 2:
            world_path = self._smooth_path(world_path)

        logger.info("Planned %d waypoints, %.2fm, %d expansions",
                    len(world_path), self.path_length(world_path),
                    self.last_result.expanded)
        return world_path

    def plan_cells(self, start: Tuple[int, int],
                   goal: Tuple[int, int]) -> Optional[List[Tuple[int, int]]]:
        """A* in map cells. Returns list of (mx, my) or None."""
        graph = GridGraph(self._inflated_map, allow_diagonal=self.config.allow_diagonal)
        heuristic = octile(goal) if self.config.allow_diagonal else manhattan(goal)
        search = AStarSearch(graph, heuristic, SearchConfig(
            max_expansions=self.config.max_expansions,
            heuristic_weight=self.config.heuristic_weight,
        ))
        self.last_result = search.run(tuple(start), tuple(goal))
        return self.last_result.path

    def _cell_ok(self, cell: Tuple[int, int], label: str,
                 world: Tuple[float, float]) -> bool:
        mx, my = cell
        if not self._in_bounds(mx, my):
            logger.warning("%s %s is outside map", label, world)
            return False
        if self._inflated_map[my, mx]:
            logger.warning("%s %s is inside an obstacle", label, world)
            return False
        return True

    def _smooth_path(self, path: List[Tuple[float, float]]) -> List[Tuple[float, float]]:
        """
        Pull interior waypoints toward their neighbours' midpoint while
        anchoring them to the raw A* cells. Endpoints never move.

        Reference: Sebastian Thrun's path smoothing algorithm
        """
        anchor = np.asarray(path, dtype=np.float64)
        points = anchor.copy()
        w_data = self.config.smooth_weight_data
        w_smooth = self.config.smooth_weight_smooth

        for _ in range(200):
            inner = points[1:-1]
            pulled = inner + w_data * (anchor[1:-1] - inner)
            pulled += w_smooth * (points[:-2] + points[2:] - 2.0 * pulled)
            delta = np.abs(pulled - inner).sum()
            points[1:-1] = pulled
            if delta < 1e-4:
                break

        # Points pushed into an obstacle keep their raw cell position
        cells = np.floor((points - self._origin) / self._map_resolution).astype(int)
        mx, my = cells[:, 0], cells[:, 1]
        inside = (mx >= 0) & (mx < self._map_width) & (my >= 0) & (my < self._map_height)
        free = np.zeros(len(points), dtype=bool)
        free[inside] = ~self._inflated_map[my[inside], mx[inside]]
        free[0] = False

        return [tuple(map(float, points[i])) if free[i] else path[i]
                for i in range(len(path))]

    @property
    def _origin(self) -> np.ndarray:
        return np.array([self._map_origin_x, self._map_origin_y])

    def _world_to_map(self, x: float, y: float) -> Tuple[int, int]:
        """Convert world to map coordinates."""
        mx = int(math.floor((x - self._map_origin_x) / self._map_resolution))
        my = int(math.floor((y - self._map_origin_y) / self._map_resolution))
        return mx, my

    def _map_to_world(self, mx: int, my: int) -> Tuple[float, float]:
        """Cell center in world coordinates."""
        half = 0.5 * self._map_resolution
        return (self._map_origin_x + mx * self._map_resolution + half,
                self._map_origin_y + my * self._map_resolution + half)

    def _in_bounds(self, mx: int, my: int) -> bool:
        return 0 <= mx < self._map_width and 0 <= my < self._map_height

    @staticmethod
    def path_length(path: List[Tuple[float, float]]) -> float:
        """Sum of segment lengths, in meters."""
        if len(path) < 2:
            return 0.0
        segments = np.diff(np.asarray(path, dtype=np.float64), axis=0)
        return float(np.hypot(segments[:, 0], segments[:, 1]).sum())


def simplify_path(path: List[Tuple[float, float]],
                  tolerance: float = 0.1) -> List[Tuple[float, float]]:
    """
    Simplify path using Ramer-Douglas-Peucker algorithm.

    Reduces number of waypoints while keeping shape.
    """
    if len(path) <= 2:
        return list(path)

    start = np.array(path[0], dtype=np.float64)
    end = np.array(path[-1], dtype=np.float64)
    line_vec = end - start
    line_len = np.linalg.norm(line_vec)

    points = np.array(path[1:-1], dtype=np.float64)
    if line_len < 1e-10:
        dists = np.linalg.norm(points - start, axis=1)
    else:
        line_unit = line_vec / line_len
        proj = np.clip((points - start) @ line_unit, 0.0, line_len)
        closest = start + proj[:, None] * line_unit
        dists = np.linalg.norm(points - closest, axis=1)

    max_idx = int(np.argmax(dists)) + 1
    if dists[max_idx - 1] > tolerance:
        left = simplify_path(path[:max_idx + 1], tolerance)
        right = simplify_path(path[max_idx:], tolerance)
        return left[:-1] + right
    return [path[0], path[-1]]
