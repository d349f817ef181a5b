"""
celestial: Barnes-Hut octree gravity for N-body point masses.

Approximates the gravitational force on a body by treating distant clusters
of bodies as a single mass at their center of mass.
"""

__version__ = "1.0.0"

# Core imports for convenience
from celestial.core import (
    Body,
    GravitySolver,
    ICGenerator,
    PointMass,
    Vector3,
)
from celestial.gravity import (
    BarnesHutGravity,
    EmptyTreeError,
    NewtonianGravity,
    Octree,
)
from celestial.config import OctreeConfig

__all__ = [
    "Body",
    "GravitySolver",
    "ICGenerator",
    "PointMass",
    "Vector3",
    "Octree",
    "EmptyTreeError",
    "BarnesHutGravity",
    "NewtonianGravity",
    "OctreeConfig",
]
