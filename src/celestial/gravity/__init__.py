"""
Gravity module: Barnes-Hut octree and direct-summation solvers.
"""

from .octree import (
    BodyOutOfBoundsError,
    EmptyTreeError,
    Octree,
    OctreeInternal,
    OctreeLeaf,
    OctreeNode,
)
from .newtonian import NewtonianGravity
from .barnes_hut import BarnesHutGravity

__all__ = [
    "Octree",
    "OctreeNode",
    "OctreeLeaf",
    "OctreeInternal",
    "EmptyTreeError",
    "BodyOutOfBoundsError",
    "NewtonianGravity",
    "BarnesHutGravity",
]
