#!/usr/bin/env python3
"""
Localization Demo

Runs the three estimation routines on small simulated problems:
- Histogram localization on a colored toroidal grid
- Kalman tracking of a 1D constant-velocity robot
- Particle resampling statistics

Usage:
    python scripts/demo_localization.py
    python scripts/demo_localization.py --seed 3 --steps 20
"""

import sys
import os
import argparse
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from localization import (
    GridLocalizer, Direction, MotionSpec, SenseSpec,
    GaussianBelief, resample, effective_sample_size
)


def demo_histogram(rng: np.random.Generator, steps: int):
    print("\n--- Histogram localization ---")
    world = rng.choice(np.array(['black', 'white'], dtype=object), size=(6, 5))
    motion_spec = MotionSpec(p_move_fail=0.1)
    sense_spec = SenseSpec(p_inaccurate=0.1)

    true_x, true_y = 2, 2
    localizer = GridLocalizer(world)
    width, height = world.shape

    for step in range(steps):
        direction = list(Direction)[rng.integers(len(Direction))]
        if rng.random() > motion_spec.p_move_fail:
            true_x = (true_x + direction.dx) % width
            true_y = (true_y + direction.dy) % height
        localizer.move(direction, motion_spec)

        observation = world[true_x, true_y]
        if rng.random() < sense_spec.p_inaccurate:
            observation = 'white' if observation == 'black' else 'black'
        localizer.sense(observation, sense_spec)

    estimate = localizer.most_likely()
    confidence = localizer.probabilities[estimate]
    print(f"True cell: ({true_x}, {true_y})  estimate: {estimate}  p={confidence:.3f}")


def demo_kalman(rng: np.random.Generator, steps: int):
    print("\n--- Kalman filter ---")
    dt = 0.1
    a = np.array([[1.0, dt], [0.0, 1.0]])      # constant velocity
    q = np.diag([0.001, 0.01])                 # process noise
    c = np.array([[1.0, 0.0]])                 # position only
    r = np.array([[0.05]])                     # measurement noise

    state = np.array([0.0, 1.0])
    belief = GaussianBelief(np.zeros(2), np.eye(2))

    for step in range(steps):
        state = a @ state + rng.multivariate_normal(np.zeros(2), q)
        z = c @ state + rng.normal(0.0, np.sqrt(r[0, 0]), size=1)

        predicted = belief.affine_transform(a)
        predicted = GaussianBelief(predicted.mean, predicted.cov + q)
        belief = predicted.condition(c, GaussianBelief(z, r))

    print(f"True:     x={state[0]:.3f} v={state[1]:.3f}")
    print(f"Estimate: x={belief.mean[0]:.3f} v={belief.mean[1]:.3f}  "
          f"std=({np.sqrt(belief.cov[0, 0]):.3f}, {np.sqrt(belief.cov[1, 1]):.3f})")


def demo_resample(rng: np.random.Generator, n: int = 1000):
    print("\n--- Particle resampling ---")
    particles = rng.normal(0.0, 1.0, size=n)
    weights = np.exp(-0.5 * ((particles - 1.0) / 0.3) ** 2)
    print(f"Effective sample size before: {effective_sample_size(weights):.1f} / {n}")
    sample = resample(particles, weights, rng=rng)
    print(f"Weighted mean: {np.average(particles, weights=weights):.3f}  "
          f"resampled mean: {np.mean(sample):.3f}")


def main():
    parser = argparse.ArgumentParser(description='Localization demo')
    parser.add_argument('--seed', type=int, default=0)
    parser.add_argument('--steps', type=int, default=15)
    args = parser.parse_args()

    print("=" * 60)
    print("LOCALIZATION DEMO")
    print("=" * 60)

    rng = np.random.default_rng(args.seed)
    demo_histogram(rng, args.steps)
    demo_kalman(rng, args.steps)
    demo_resample(rng)

    print("\nDemo complete!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
