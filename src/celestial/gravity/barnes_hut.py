"""
Barnes-Hut gravity solver for arrays of point masses.

Implements O(N log N) gravitational acceleration by building an ``Octree``
over the bodies and walking it once per body.

Reference:
    Barnes & Hut (1986) - A Hierarchical O(N log N) Force-Calculation Algorithm
"""

from typing import Optional
import numpy as np

from celestial.core.body import PointMass
from celestial.core.interfaces import GravitySolver, NDArrayFloat
from celestial.gravity.octree import DEFAULT_MAX_DEPTH, G_CONST, THETA, Octree


class BarnesHutGravity(GravitySolver):
    """
    Barnes-Hut O(N log N) gravity solver.

    Each body is probed with a unit test mass at its own position, so the
    returned force is its acceleration. The body's own leaf contributes
    nothing; for theta above 1/sqrt(3) ~ 0.58 the cell containing a body can be
    accepted as a whole, which then includes the body's own mass.

    Parameters
    ----------
    G : float
        Gravitational constant.
    theta : float
        Opening angle (0 = exact).
    max_depth : Optional[int]
        Depth limit passed to the octree.
    root_extent : Optional[float]
        Root cube size; None sizes the cube to enclose the bodies on each build.
    strict_bounds : bool
        Reject bodies outside a fixed root cube instead of warning.
    verbose : bool
        Print tree statistics after each build.
    """

    def __init__(
        self,
        G: float = G_CONST,
        theta: float = THETA,
        max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
        root_extent: Optional[float] = None,
        strict_bounds: bool = False,
        verbose: bool = False
    ):
        self.G = float(G)
        self.theta = float(theta)
        self.max_depth = max_depth
        self.root_extent = root_extent
        self.strict_bounds = strict_bounds
        self.verbose = verbose
        self.last_tree: Optional[Octree] = None

    @classmethod
    def from_config(cls, config, use_root_extent: bool = True) -> "BarnesHutGravity":
        """
        Create a solver from an ``OctreeConfig``.

        Softening is not stored on the solver; pass ``config.softening`` to
        ``compute_acceleration``. With ``use_root_extent=False`` the root cube
        is sized from the bodies instead of ``config.root_extent``.
        """
        return cls(
            G=config.G,
            theta=config.theta,
            max_depth=config.max_depth,
            root_extent=config.root_extent if use_root_extent else None,
            strict_bounds=config.strict_bounds,
            verbose=config.verbose,
        )

    def build_tree(
        self,
        positions: NDArrayFloat,
        masses: NDArrayFloat,
        softening: float = 0.0
    ) -> Octree:
        """Build (and remember) the octree for the given bodies."""
        bodies = PointMass.from_arrays(positions, masses)
        self.last_tree = Octree.from_bodies(
            bodies,
            root_extent=self.root_extent,
            theta=self.theta,
            G=self.G,
            softening=softening,
            max_depth=self.max_depth,
            strict_bounds=self.strict_bounds,
            verbose=self.verbose,
        )
        return self.last_tree

    def get_tree_data(self) -> Optional[Octree]:
        """Return the tree from the last build, if any."""
        return self.last_tree

    def compute_acceleration(
        self,
        positions: NDArrayFloat,
        masses: NDArrayFloat,
        softening: float = 0.0
    ) -> NDArrayFloat:
        positions = np.asarray(positions, dtype=np.float64)
        masses = np.asarray(masses, dtype=np.float64)

        accel = np.zeros((len(positions), 3), dtype=np.float64)
        if len(positions) == 0:
            return accel

        tree = self.build_tree(positions, masses, softening)
        for i, probe in enumerate(PointMass.from_arrays(positions, np.ones(len(positions)))):
            accel[i] = tree.force_on(probe).to_array()

        return accel

    def compute_potential(
        self,
        positions: NDArrayFloat,
        masses: NDArrayFloat,
        softening: float = 0.0
    ) -> NDArrayFloat:
        positions = np.asarray(positions, dtype=np.float64)
        masses = np.asarray(masses, dtype=np.float64)

        potential = np.zeros(len(positions), dtype=np.float64)
        if len(positions) == 0:
            return potential

        tree = self.build_tree(positions, masses, softening)
        for i, probe in enumerate(PointMass.from_arrays(positions, np.ones(len(positions)))):
            potential[i] = tree.potential_at(probe)

        return potential

    def __repr__(self) -> str:
        return (
            f"BarnesHutGravity(G={self.G}, theta={self.theta}, "
            f"max_depth={self.max_depth})"
        )
