"""
Point-mass body implementation.

``PointMass`` is both the real body callers insert into the octree and the
aggregate each internal node keeps for its subtree (aggregates carry no
label).
"""

from dataclasses import dataclass, field
from typing import List, Optional
import math
import numpy as np

from celestial.core.interfaces import Body, NDArrayFloat
from celestial.core.vector import Vector3


@dataclass(frozen=True)
class PointMass(Body):
    """
    Immutable point mass.

    Attributes
    ----------
    position : Vector3
        Cartesian position.
    mass : float
        Non-negative mass.
    velocity : Vector3
        Velocity; aggregates carry the momentum-weighted mean.
    label : Optional[int]
        Identifier of a real body (e.g. its index in the input arrays).
    """

    position: Vector3
    mass: float
    velocity: Vector3 = field(default_factory=Vector3.zero)
    label: Optional[int] = None

    def __post_init__(self):
        if not math.isfinite(self.mass) or self.mass < 0.0:
            raise ValueError(f"mass must be finite and non-negative, got {self.mass}")

    def gravitational_force(
        self,
        other: Body,
        G: float = 1.0,
        softening: float = 0.0
    ) -> Vector3:
        # F = G m1 m2 (r2 - r1) / (|r2 - r1|² + ε²)^(3/2)
        d = other.position.minus(self.position)
        r2 = d.dot(d) + softening * softening
        if r2 == 0.0:
            return Vector3.zero()
        return d.scaled(G * self.mass * other.mass * r2 ** -1.5)

    def merge(self, other: Body) -> "PointMass":
        total = self.mass + other.mass
        other_velocity = getattr(other, "velocity", Vector3.zero())
        if total == 0.0:
            return PointMass(
                self.position.plus(other.position).scaled(0.5),
                0.0,
                self.velocity.plus(other_velocity).scaled(0.5),
            )

        w_self = self.mass / total
        w_other = other.mass / total
        return PointMass(
            self.position.scaled(w_self).plus(other.position.scaled(w_other)),
            total,
            self.velocity.scaled(w_self).plus(other_velocity.scaled(w_other)),
        )

    @classmethod
    def from_arrays(
        cls,
        positions: NDArrayFloat,
        masses: NDArrayFloat,
        velocities: Optional[NDArrayFloat] = None
    ) -> List["PointMass"]:
        """
        Build labelled bodies from array data.

        Parameters
        ----------
        positions : NDArrayFloat, shape (N, 3)
        masses : NDArrayFloat, shape (N,)
        velocities : NDArrayFloat, shape (N, 3), optional

        Returns
        -------
        bodies : List[PointMass]
            Bodies labelled with their row index.
        """
        positions = np.asarray(positions, dtype=np.float64)
        masses = np.asarray(masses, dtype=np.float64)
        if positions.ndim != 2 or positions.shape[1] != 3:
            raise ValueError(f"positions must have shape (N, 3), got {positions.shape}")
        if masses.shape != (positions.shape[0],):
            raise ValueError(
                f"masses must have shape ({positions.shape[0]},), got {masses.shape}"
            )
        if velocities is None:
            velocities = np.zeros_like(positions)
        else:
            velocities = np.asarray(velocities, dtype=np.float64)
            if velocities.shape != positions.shape:
                raise ValueError("velocities must match the shape of positions")

        return [
            cls(
                Vector3.from_array(positions[i]),
                float(masses[i]),
                Vector3.from_array(velocities[i]),
                label=i,
            )
            for i in range(len(masses))
        ]
