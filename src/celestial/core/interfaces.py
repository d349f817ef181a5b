"""
Abstract base classes defining the contracts between celestial modules.

The octree only talks to bodies through the ``Body`` interface, and the
array-level solvers share the ``GravitySolver`` interface so the tree code
and the direct-summation reference can be swapped for one another.
"""

from abc import ABC, abstractmethod
from typing import Tuple
import numpy as np
import numpy.typing as npt

from celestial.core.vector import Vector3


# Type aliases for clarity
NDArrayFloat = npt.NDArray[np.float64]


class Body(ABC):
    """
    Abstract point mass as seen by the octree.

    Implementations must supply ``position`` and ``mass`` attributes, and the four
    capabilities the tree needs: octant classification, pairwise distance,
    pairwise gravitational force and aggregation into a combined body.
    """

    position: Vector3
    mass: float

    def octant_index(self, center: Vector3) -> int:
        """
        Octant code of this body relative to ``center``.

        Bit 4 is set when x >= center.x, bit 2 for y and bit 1 for z, so
        e.g. index 3 corresponds to [x: 0, y: 1, z: 1].

        Returns
        -------
        index : int
            Octant index in [0, 7].
        """
        p = self.position
        index = 0
        if p.x >= center.x:
            index |= 4
        if p.y >= center.y:
            index |= 2
        if p.z >= center.z:
            index |= 1
        return index

    def distance_to(self, other: "Body") -> float:
        """Euclidean distance between the two bodies."""
        return self.position.distance_to(other.position)

    def gravitational_potential(
        self,
        other: "Body",
        G: float = 1.0,
        softening: float = 0.0
    ) -> float:
        """
        Potential per unit mass at this body due to ``other``.

        Coincident bodies contribute nothing, so a body never sees its own
        potential well.
        """
        d = other.position.minus(self.position)
        r2 = d.dot(d)
        if r2 == 0.0:
            return 0.0
        return -G * other.mass / (r2 + softening * softening) ** 0.5

    @abstractmethod
    def gravitational_force(
        self,
        other: "Body",
        G: float = 1.0,
        softening: float = 0.0
    ) -> Vector3:
        """
        Gravitational force exerted on this body by ``other``.

        Parameters
        ----------
        other : Body
            Attracting body (real or aggregate).
        G : float
            Gravitational constant.
        softening : float
            Plummer softening length ε.

        Returns
        -------
        force : Vector3
            Force directed from this body toward ``other``.
        """
        pass

    @abstractmethod
    def merge(self, other: "Body") -> "Body":
        """
        Aggregate two bodies into one.

        Returns
        -------
        combined : Body
            Body with the summed mass located at the mass-weighted centroid.
        """
        pass


class GravitySolver(ABC):
    """
    Abstract base class for array-level gravity solvers.

    Implementations: BarnesHutGravity (octree), NewtonianGravity (direct).
    """

    @abstractmethod
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
            Body positions.
        masses : NDArrayFloat, shape (N,)
            Body masses.
        softening : float
            Plummer softening length.

        Returns
        -------
        accel : NDArrayFloat, shape (N, 3)
            Gravitational acceleration on each body.
        """
        pass

    @abstractmethod
    def compute_potential(
        self,
        positions: NDArrayFloat,
        masses: NDArrayFloat,
        softening: float = 0.0
    ) -> NDArrayFloat:
        """
        Compute the gravitational potential at each body.

        Returns
        -------
        potential : NDArrayFloat, shape (N,)
            Potential per unit mass at each body, excluding self-interaction.
        """
        pass


class ICGenerator(ABC):
    """
    Abstract base class for initial body distributions.

    Implementations: UniformSphere, PlummerSphere.
    """

    @abstractmethod
    def generate(
        self,
        n_bodies: int,
        **kwargs
    ) -> Tuple[NDArrayFloat, NDArrayFloat, NDArrayFloat]:
        """
        Generate an initial body distribution.

        Parameters
        ----------
        n_bodies : int
            Number of bodies to generate.
        **kwargs : model-specific parameters (centre offset, velocity, ...).

        Returns
        -------
        positions : NDArrayFloat, shape (n_bodies, 3)
        velocities : NDArrayFloat, shape (n_bodies, 3)
        masses : NDArrayFloat, shape (n_bodies,)
        """
        pass
