"""
Linear-Gaussian belief (Kalman filter building blocks).

A belief N(mean, cov) supports the two Kalman steps:
- predict: affine_transform(A, b) maps x -> A x + b
- update:  condition(C, observation) on a noisy linear measurement C x

The covariance may be singular (e.g. a perfectly known state component).
"""

from typing import Optional

import numpy as np


class DegenerateCovarianceError(np.linalg.LinAlgError):
    """Innovation covariance R + C P C' is singular."""


class GaussianBelief:
    """
    Multivariate Gaussian belief.

    Usage:
        prior = GaussianBelief(np.zeros(2), np.eye(2))

        # Motion: x' = A x + b
        predicted = prior.affine_transform(A, b)

        # Measurement z = C x + noise, noise ~ N(0, R)
        posterior = predicted.condition(C, GaussianBelief(z, R))
    """

    def __init__(self, mean, cov):
        mean = np.atleast_1d(np.asarray(mean, dtype=np.float64))
        cov = np.atleast_2d(np.asarray(cov, dtype=np.float64))
        if mean.ndim != 1:
            raise ValueError(f"Mean must be a vector, got shape {mean.shape}")
        if cov.shape != (mean.size, mean.size):
            raise ValueError(f"Covariance shape {cov.shape} does not match mean of size {mean.size}")
        self.mean = mean
        self.cov = cov

    @property
    def dim(self) -> int:
        return self.mean.size

    def affine_transform(self, a, b: Optional[np.ndarray] = None) -> 'GaussianBelief':
        """
        Belief over y = A x + b.

        Args:
            a: (m, n) matrix
            b: (m,) offset, default 0
        """
        a = np.atleast_2d(np.asarray(a, dtype=np.float64))
        if a.shape[1] != self.dim:
            raise ValueError(f"Transform shape {a.shape} does not match belief of size {self.dim}")
        mean = a @ self.mean
        if b is not None:
            b = np.asarray(b, dtype=np.float64)
            if b.shape != (a.shape[0],):
                raise ValueError(f"Offset shape {b.shape} does not match transform output size {a.shape[0]}")
            mean = mean + b
        cov = a @ self.cov @ a.T
        return GaussianBelief(mean, cov)

    def condition(self, c, observation: 'GaussianBelief') -> 'GaussianBelief':
        """
        Posterior after observing C x, where the observation is itself Gaussian.

        Args:
            c: (m, n) observation matrix
            observation: N(z, R) over the m observed quantities

        Raises:
            DegenerateCovarianceError: R + C P C' is singular
        """
        c = np.atleast_2d(np.asarray(c, dtype=np.float64))
        if c.shape != (observation.dim, self.dim):
            raise ValueError(
                f"Observation matrix shape {c.shape} does not match "
                f"({observation.dim}, {self.dim})")

        innovation_cov = observation.cov + c @ self.cov @ c.T
        innovation = observation.mean - c @ self.mean
        try:
            innovation_precision = np.linalg.inv(innovation_cov)
        except np.linalg.LinAlgError as e:
            raise DegenerateCovarianceError(f"Degenerate observation covariance: {e}") from e

        gain = self.cov @ c.T @ innovation_precision
        mean = self.mean + gain @ innovation
        cov = (np.eye(self.dim) - gain @ c) @ self.cov
        return GaussianBelief(mean, cov)

    def __repr__(self) -> str:
        return f"GaussianBelief(mean={self.mean!r}, cov={self.cov!r})"
