#!/usr/bin/env python3
"""
Planning Demo

A* path planning on a simulated occupancy map:
- Obstacle inflation
- A* search (octile heuristic)
- Path smoothing and simplification
- Optional matplotlib visualization

Usage:
    python scripts/demo_planning.py
    python scripts/demo_planning.py --no-viz --start -5 -5 --goal 5 5
    python scripts/demo_planning.py --no-diagonal --weight 1.5
"""

import sys
import os
import argparse
import logging
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from planning.grid_planner import GridPlanner, PlannerConfig, simplify_path

try:
    import matplotlib.pyplot as plt
    MATPLOTLIB_AVAILABLE = True
except ImportError:
    MATPLOTLIB_AVAILABLE = False


def create_test_map(size: int = 200) -> np.ndarray:
    """Create a test map with walls and block obstacles (True = occupied)."""
    grid = np.zeros((size, size), dtype=bool)

    # Border walls
    grid[0, :] = True
    grid[-1, :] = True
    grid[:, 0] = True
    grid[:, -1] = True

    # Interior walls, indexed [y, x]
    grid[60:140, 80] = True            # Vertical wall
    grid[100, 60:80] = True            # Horizontal walls
    grid[100, 120:140] = True

    # Obstacles (blocks)
    for cx, cy in [(40, 60), (140, 50), (60, 150), (150, 140)]:
        grid[cy - 3:cy + 4, cx - 3:cx + 4] = True

    return grid


def show(planner: GridPlanner, path, simplified, resolution: float, origin: float):
    extent = [origin, origin + planner.inflated_map.shape[1] * resolution,
              origin, origin + planner.inflated_map.shape[0] * resolution]
    fig, ax = plt.subplots(figsize=(8, 8))
    ax.imshow(planner.inflated_map, origin='lower', cmap='Greys', extent=extent)
    if path:
        xs, ys = zip(*path)
        ax.plot(xs, ys, 'b-', linewidth=1.5, label='A* path')
        sx, sy = zip(*simplified)
        ax.plot(sx, sy, 'ro--', markersize=4, label='Simplified')
        ax.plot(xs[0], ys[0], 'gs', markersize=10, label='Start')
        ax.plot(xs[-1], ys[-1], 'r*', markersize=14, label='Goal')
    ax.set_xlabel('x (m)')
    ax.set_ylabel('y (m)')
    ax.set_title('Global planner')
    ax.legend(loc='upper right')
    plt.show()


def main():
    parser = argparse.ArgumentParser(description='A* planning demo')
    parser.add_argument('--start', type=float, nargs=2, default=[-5.0, -5.0],
                        metavar=('X', 'Y'), help='Start position (m)')
    parser.add_argument('--goal', type=float, nargs=2, default=[5.0, 5.0],
                        metavar=('X', 'Y'), help='Goal position (m)')
    parser.add_argument('--resolution', type=float, default=0.1,
                        help='Map resolution (m/cell)')
    parser.add_argument('--robot-radius', type=float, default=0.2)
    parser.add_argument('--weight', type=float, default=1.0,
                        help='Heuristic weight (>1 = faster, suboptimal)')
    parser.add_argument('--no-diagonal', action='store_true',
                        help='4-connected moves only')
    parser.add_argument('--no-viz', action='store_true',
                        help='Console output only')
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='[%(name)s] %(message)s'
    )

    print("=" * 60)
    print("PLANNING DEMO")
    print("=" * 60)

    origin = -10.0
    planner = GridPlanner(PlannerConfig(
        robot_radius=args.robot_radius,
        safety_margin=0.1,
        allow_diagonal=not args.no_diagonal,
        heuristic_weight=args.weight,
    ))
    planner.set_map_array(create_test_map(), args.resolution,
                          origin_x=origin, origin_y=origin)

    start = tuple(args.start)
    goal = tuple(args.goal)
    print(f"\nPlanning path from {start} to {goal}...")
    path = planner.plan(start, goal)

    if path is None:
        print("No path found!")
        return 1

    simplified = simplify_path(path, tolerance=0.2)
    result = planner.last_result
    print(f"Path found: {len(path)} cells, {planner.path_length(path):.2f}m")
    print(f"Simplified: {len(simplified)} waypoints")
    print(f"Expanded {result.expanded} nodes in {result.elapsed * 1000:.1f}ms")

    if not args.no_viz:
        if MATPLOTLIB_AVAILABLE:
            show(planner, path, simplified, args.resolution, origin)
        else:
            print("matplotlib not installed, skipping visualization")

    return 0


if __name__ == '__main__':
    sys.exit(main())
