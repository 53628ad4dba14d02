"""
Particle resampling.

- resample(): unbiased multinomial resampling in O(n log n)
  (sorted uniform draws walked against the cumulative weights)
- systematic_resample(): low variance resampling, one random offset
- effective_sample_size(): when to resample

References:
- Probabilistic Robotics (Thrun, Burgard, Fox), Table 4.4
- F1Tenth Particle Filter: https://github.com/f1tenth/particle_filter
"""

from typing import Optional, Sequence

import numpy as np


def _check_weights(n: int, weights) -> np.ndarray:
    weights = np.asarray(weights, dtype=np.float64)
    if weights.shape != (n,):
        raise ValueError(f"Expected {n} weights, got shape {weights.shape}")
    if np.any(weights < 0):
        raise ValueError("Weights must be non-negative")
    if not weights.sum() > 0:
        raise ValueError("Total weight must be positive")
    return weights


def _take(particles, indices: np.ndarray):
    if isinstance(particles, np.ndarray):
        return particles[indices]
    return [particles[i] for i in indices]


def resample(particles: Sequence, weights: Sequence[float],
             rng: Optional[np.random.Generator] = None):
    """
    Draw len(particles) particles with replacement, proportionally to weights.

    Args:
        particles: Sequence (or array, first axis) of particles
        weights: Unnormalized non-negative weights, one per particle
        rng: Random generator (default: fresh default_rng())

    Returns:
        Same-length list (or array, if particles is an array); empty for
        zero particles
    """
    n = len(particles)
    if n == 0:
        return particles[:0] if isinstance(particles, np.ndarray) else []

    weights = _check_weights(n, weights)
    rng = rng or np.random.default_rng()

    cumulative = np.cumsum(weights)
    draws = np.sort(rng.random(n) * cumulative[-1])
    # First index whose cumulative weight exceeds the draw
    indices = np.searchsorted(cumulative, draws, side='right')
    # Float round-off at the top end
    indices = np.minimum(indices, n - 1)
    return _take(particles, indices)


def systematic_resample(particles: Sequence, weights: Sequence[float],
                        rng: Optional[np.random.Generator] = None):
    """Low variance resampling: n evenly spaced pointers, one random offset."""
    n = len(particles)
    if n == 0:
        return particles[:0] if isinstance(particles, np.ndarray) else []

    weights = _check_weights(n, weights)
    rng = rng or np.random.default_rng()

    cumulative = np.cumsum(weights / weights.sum())
    pointers = rng.uniform(0, 1.0 / n) + np.arange(n) / n
    indices = np.minimum(np.searchsorted(cumulative, pointers, side='right'), n - 1)
    return _take(particles, indices)


def effective_sample_size(weights: Sequence[float]) -> float:
    """1 / sum(w^2) of the normalized weights. n for uniform weights, 1 for a single spike."""
    weights = np.asarray(weights, dtype=np.float64)
    total = weights.sum()
    if not total > 0:
        return 0.0
    normalized = weights / total
    return float(1.0 / np.sum(normalized ** 2))
