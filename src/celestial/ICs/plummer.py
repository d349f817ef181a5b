"""
Plummer sphere initial conditions.

Density profile:
    ρ(r) = 3M / (4π a³) · (1 + r²/a²)^(-5/2)

Radii are drawn by inverting the cumulative mass M(<r)/M = r³ / (r² + a²)^(3/2):
    r = a / sqrt(X^(-2/3) - 1),   X ~ U(0, 1)

References
----------
- Plummer, H. C. (1911), MNRAS, 71, 460
- Aarseth, S. J., Hénon, M. & Wielen, R. (1974), A&A, 37, 183
"""

import numpy as np
from typing import Optional, Tuple
from celestial.core.interfaces import ICGenerator, NDArrayFloat
from celestial.ICs.uniform import random_directions


class PlummerSphere(ICGenerator):
    """
    Equal-mass bodies following a Plummer profile, at rest.

    Attributes
    ----------
    scale_radius : float
        Plummer scale length a.
    total_mass : float
        Total mass.
    truncation : float
        Bodies are drawn within ``truncation * scale_radius``.
    random_seed : Optional[int]
        Random seed for reproducible placement.
    """

    def __init__(
        self,
        scale_radius: float = 1.0,
        total_mass: float = 1.0,
        truncation: float = 10.0,
        random_seed: Optional[int] = 42
    ):
        if scale_radius <= 0.0:
            raise ValueError(f"scale_radius must be positive, got {scale_radius}")
        if total_mass <= 0.0:
            raise ValueError(f"total_mass must be positive, got {total_mass}")
        if truncation <= 0.0:
            raise ValueError(f"truncation must be positive, got {truncation}")
        self.scale_radius = float(scale_radius)
        self.total_mass = float(total_mass)
        self.truncation = float(truncation)
        self.random_seed = random_seed

    def enclosed_mass_fraction(self, r: float) -> float:
        """Fraction of the (untruncated) mass within radius r."""
        a = self.scale_radius
        return r**3 / (r**2 + a**2) ** 1.5

    def generate(
        self,
        n_bodies: int,
        **kwargs
    ) -> Tuple[NDArrayFloat, NDArrayFloat, NDArrayFloat]:
        """
        Generate a Plummer sphere centered at ``position`` (default origin).

        Returns
        -------
        positions : NDArrayFloat, shape (n_bodies, 3)
        velocities : NDArrayFloat, shape (n_bodies, 3)
            Zero; velocity sampling belongs to the integrator setup.
        masses : NDArrayFloat, shape (n_bodies,)
        """
        if n_bodies < 1:
            raise ValueError(f"n_bodies must be at least 1, got {n_bodies}")

        if self.random_seed is not None:
            np.random.seed(self.random_seed)

        # Sample X only up to the truncation radius' mass fraction
        x_max = self.enclosed_mass_fraction(self.truncation * self.scale_radius)
        x = np.random.uniform(1e-10, x_max, n_bodies)
        r = self.scale_radius / np.sqrt(x ** (-2.0 / 3.0) - 1.0)

        positions = random_directions(n_bodies) * r[:, np.newaxis]
        positions += np.asarray(kwargs.get("position", np.zeros(3)), dtype=np.float64)

        velocities = np.zeros((n_bodies, 3), dtype=np.float64)
        masses = np.full(n_bodies, self.total_mass / n_bodies, dtype=np.float64)

        return positions, velocities, masses
