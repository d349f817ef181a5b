"""
Uniform-density sphere of equal-mass bodies.
"""

import numpy as np
from typing import Optional, Tuple
from celestial.core.interfaces import ICGenerator, NDArrayFloat


def random_directions(n: int) -> NDArrayFloat:
    """Isotropic unit vectors, shape (n, 3)."""
    cos_theta = np.random.uniform(-1.0, 1.0, n)
    phi = np.random.uniform(0.0, 2.0 * np.pi, n)
    sin_theta = np.sqrt(1.0 - cos_theta**2)
    return np.column_stack([
        sin_theta * np.cos(phi),
        sin_theta * np.sin(phi),
        cos_theta,
    ])


class UniformSphere(ICGenerator):
    """
    Bodies scattered uniformly inside a sphere.

    Attributes
    ----------
    radius : float
        Sphere radius.
    total_mass : float
        Mass shared equally among all bodies.
    random_seed : Optional[int]
        Random seed for reproducible placement.
    """

    def __init__(
        self,
        radius: float = 1.0,
        total_mass: float = 1.0,
        random_seed: Optional[int] = 42
    ):
        if radius <= 0.0:
            raise ValueError(f"radius must be positive, got {radius}")
        if total_mass <= 0.0:
            raise ValueError(f"total_mass must be positive, got {total_mass}")
        self.radius = float(radius)
        self.total_mass = float(total_mass)
        self.random_seed = random_seed

    def generate(
        self,
        n_bodies: int,
        **kwargs
    ) -> Tuple[NDArrayFloat, NDArrayFloat, NDArrayFloat]:
        """
        Generate a uniform sphere.

        Parameters
        ----------
        n_bodies : int
            Number of bodies.
        **kwargs
            - position : array-like, shape (3,), default [0,0,0] - Sphere center.
            - velocity : array-like, shape (3,), default [0,0,0] - Bulk velocity.

        Returns
        -------
        positions : NDArrayFloat, shape (n_bodies, 3)
        velocities : NDArrayFloat, shape (n_bodies, 3)
        masses : NDArrayFloat, shape (n_bodies,)
        """
        if n_bodies < 1:
            raise ValueError(f"n_bodies must be at least 1, got {n_bodies}")

        if self.random_seed is not None:
            np.random.seed(self.random_seed)

        # r ∝ u^(1/3) gives uniform density
        r = self.radius * np.random.uniform(0.0, 1.0, n_bodies) ** (1.0 / 3.0)
        positions = random_directions(n_bodies) * r[:, np.newaxis]
        positions += np.asarray(kwargs.get("position", np.zeros(3)), dtype=np.float64)

        velocities = np.tile(
            np.asarray(kwargs.get("velocity", np.zeros(3)), dtype=np.float64),
            (n_bodies, 1),
        )
        masses = np.full(n_bodies, self.total_mass / n_bodies, dtype=np.float64)

        return positions, velocities, masses
