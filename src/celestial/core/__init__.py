"""
Core module: interfaces and value types.
"""

from celestial.core.interfaces import (
    Body,
    GravitySolver,
    ICGenerator,
)
from celestial.core.vector import Vector3
from celestial.core.body import PointMass

__all__ = [
    "Body",
    "GravitySolver",
    "ICGenerator",
    "Vector3",
    "PointMass",
]
