"""
Histogram Localization on a toroidal grid

Discrete Bayes filter over a fixed 2D grid of labelled cells (e.g. floor
colors). The belief is a probability array with the same shape as the
world map, indexed [x, y]; the world wraps around at every edge.

- move(): convolve the belief with the motion model (the robot either
  stays put or moves one cell)
- sense(): multiply by the observation likelihood and renormalize
- set_position(): collapse the belief to a known cell

Reference: Probabilistic Robotics (Thrun, Burgard, Fox), ch. 4.1
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple

import numpy as np


class Direction(Enum):
    """Unit moves on the grid. +y is UP."""
    UP = (0, 1)
    DOWN = (0, -1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]


@dataclass(frozen=True)
class MotionSpec:
    """Motion model."""
    p_move_fail: float = 0.2            # probability the robot stays in place


@dataclass(frozen=True)
class SenseSpec:
    """Sensor model."""
    p_inaccurate: float = 0.2           # likelihood weight of a non-matching cell


def move_update(probabilities: np.ndarray, direction: Direction,
                motion_spec: MotionSpec) -> np.ndarray:
    """Toroidal motion update. Mass is conserved."""
    p_fail = motion_spec.p_move_fail
    moved = np.roll(probabilities, shift=(direction.dx, direction.dy), axis=(0, 1))
    return p_fail * probabilities + (1.0 - p_fail) * moved


def sense_update(probabilities: np.ndarray, world_map: np.ndarray, observation,
                 sense_spec: SenseSpec) -> np.ndarray:
    """
    Pointwise Bayes update and renormalization.

    Raises:
        ValueError: the observation has zero likelihood everywhere
    """
    p_diff = sense_spec.p_inaccurate
    likelihood = np.where(world_map == observation, 1.0 - p_diff, p_diff)
    unnormalized = likelihood * probabilities
    norm = unnormalized.sum()
    if not norm > 0:
        raise ValueError(f"Observation {observation!r} has zero likelihood under the current belief")
    return unnormalized / norm


class GridLocalizer:
    """
    Histogram filter over a labelled toroidal grid.

    Usage:
        world = np.array([['black', 'white'], ['white', 'black']])
        localizer = GridLocalizer(world)

        localizer.sense('white', SenseSpec(p_inaccurate=0.2))
        localizer.move(Direction.RIGHT, MotionSpec(p_move_fail=0.1))

        x, y = localizer.most_likely()
    """

    def __init__(self, world_map: np.ndarray):
        """
        Args:
            world_map: 2D array of cell labels, indexed [x, y]
        """
        world_map = np.asarray(world_map)
        if world_map.ndim != 2 or world_map.size == 0:
            raise ValueError(f"World map must be a non-empty 2D array, got shape {world_map.shape}")
        self.world_map = world_map
        # Uniform prior
        self._probabilities = np.full(world_map.shape, 1.0 / world_map.size)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.world_map.shape

    @property
    def probabilities(self) -> np.ndarray:
        """Current belief (copy)."""
        return self._probabilities.copy()

    def move(self, direction: Direction, motion_spec: MotionSpec):
        self._probabilities = move_update(self._probabilities, direction, motion_spec)

    def sense(self, observation: Any, sense_spec: SenseSpec):
        self._probabilities = sense_update(
            self._probabilities, self.world_map, observation, sense_spec)

    def set_position(self, x: int, y: int):
        """Collapse the belief to a point mass at (x, y)."""
        width, height = self.shape
        if not (0 <= x < width and 0 <= y < height):
            raise ValueError(f"Position ({x}, {y}) outside {width}x{height} grid")
        self._probabilities = np.zeros(self.shape)
        self._probabilities[x, y] = 1.0

    def most_likely(self) -> Tuple[int, int]:
        """Cell with the highest probability (first one on ties)."""
        x, y = np.unravel_index(np.argmax(self._probabilities), self.shape)
        return int(x), int(y)
