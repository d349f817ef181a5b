"""
Direct-summation Newtonian gravity.

Exact O(N²) pairwise summation, vectorised with NumPy. Serves as the
reference the Barnes-Hut tree is measured against.
"""

from typing import Iterable
import numpy as np

from celestial.core.interfaces import Body, GravitySolver, NDArrayFloat
from celestial.core.vector import Vector3


class NewtonianGravity(GravitySolver):
    """
    Newtonian gravity solver using direct body-body summation.

    Parameters
    ----------
    G : float, optional
        Gravitational constant (default 1.0 for dimensionless units).

    Notes
    -----
    Softened gravitational acceleration:
        a_i = -∑_j G m_j (r_i - r_j) / (|r_i - r_j|² + ε²)^(3/2)

    Softened gravitational potential:
        φ_i = -∑_j G m_j / sqrt(|r_i - r_j|² + ε²)

    Pairs at zero separation are skipped in both sums.
    """

    def __init__(self, G: float = 1.0):
        self.G = float(G)

    def compute_acceleration(
        self,
        positions: NDArrayFloat,
        masses: NDArrayFloat,
        softening: float = 0.0
    ) -> NDArrayFloat:
        """
        Compute gravitational acceleration on all bodies.

        Parameters
        ----------
        positions : NDArrayFloat, shape (N, 3)
        masses : NDArrayFloat, shape (N,)
        softening : float
            Plummer softening length ε.

        Returns
        -------
        accel : NDArrayFloat, shape (N, 3)
        """
        positions = np.asarray(positions, dtype=np.float64)
        masses = np.asarray(masses, dtype=np.float64)

        # Pairwise separations: r_ij = r_j - r_i
        r_ij = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
        r2 = np.sum(r_ij**2, axis=2)
        r2_soft = r2 + softening**2

        # 1 / r_soft³ with coincident pairs removed
        with np.errstate(divide="ignore"):
            inv_r3 = np.where(r2 > 0, r2_soft**-1.5, 0.0)

        masses_inv_r3 = (masses[np.newaxis, :] * inv_r3)[:, :, np.newaxis]
        return self.G * np.sum(masses_inv_r3 * r_ij, axis=1)

    def compute_potential(
        self,
        positions: NDArrayFloat,
        masses: NDArrayFloat,
        softening: float = 0.0
    ) -> NDArrayFloat:
        positions = np.asarray(positions, dtype=np.float64)
        masses = np.asarray(masses, dtype=np.float64)

        r_ij = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
        r2 = np.sum(r_ij**2, axis=2)
        r_soft = np.sqrt(r2 + softening**2)
        r_soft = np.where(r2 > 0, r_soft, np.inf)

        return -self.G * np.sum(masses[np.newaxis, :] / r_soft, axis=1)

    def force_on(self, body: Body, bodies: Iterable[Body], softening: float = 0.0) -> Vector3:
        """
        Exact force on ``body`` from each of ``bodies``.

        Unlike the array methods, nothing is excluded by position apart from
        coincident pairs, matching the octree's pairwise law.
        """
        force = Vector3.zero()
        for other in bodies:
            force = force.plus(body.gravitational_force(other, self.G, softening))
        return force

    def __repr__(self) -> str:
        """String representation of solver."""
        return f"NewtonianGravity(G={self.G})"
