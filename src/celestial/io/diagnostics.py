"""
Accuracy and timing diagnostics for the Barnes-Hut tree.

Compares tree accelerations against direct summation for the same bodies:

    >>> result = compare_with_direct(positions, masses, theta=0.5)
    >>> result.max_relative_error
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional
import time
import numpy as np

from celestial.config.octree_config import OctreeConfig
from celestial.core.interfaces import NDArrayFloat
from celestial.gravity.barnes_hut import BarnesHutGravity
from celestial.gravity.newtonian import NewtonianGravity


@dataclass
class ForceComparison:
    """Summary of a tree-vs-direct acceleration comparison."""

    n_bodies: int
    theta: float
    max_relative_error: float
    mean_relative_error: float
    median_relative_error: float
    tree_time: float
    direct_time: float
    node_count: int
    tree_depth: int

    @property
    def speedup(self) -> float:
        return self.direct_time / self.tree_time if self.tree_time > 0 else float('inf')

    def as_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out['speedup'] = self.speedup
        return out


def relative_errors(approx: NDArrayFloat, exact: NDArrayFloat) -> NDArrayFloat:
    """Per-body |a_approx - a_exact| / |a_exact|; bodies with zero exact force are 0."""
    diff = np.linalg.norm(approx - exact, axis=1)
    norm = np.linalg.norm(exact, axis=1)
    return np.divide(diff, norm, out=np.zeros_like(diff), where=norm > 0)


def compare_with_direct(
    positions: NDArrayFloat,
    masses: NDArrayFloat,
    theta: float = 0.5,
    G: float = 1.0,
    softening: float = 0.0,
    config: Optional[OctreeConfig] = None
) -> ForceComparison:
    """
    Compute accelerations with both solvers and summarize the differences.

    Parameters
    ----------
    positions : NDArrayFloat, shape (N, 3)
    masses : NDArrayFloat, shape (N,)
    theta : float
        Opening angle for the tree.
    G : float
        Gravitational constant.
    softening : float
        Plummer softening length, shared by both solvers.
    config : Optional[OctreeConfig]
        If given, replaces theta, G and softening and also sets the tree's
        max_depth, strict_bounds and verbose flags. Its root_extent is used
        only when set explicitly; otherwise the root cube is sized from the
        bodies.
    """
    positions = np.asarray(positions, dtype=np.float64)
    masses = np.asarray(masses, dtype=np.float64)
    if len(positions) == 0:
        raise ValueError("compare_with_direct requires at least one body")

    if config is not None:
        theta, G, softening = config.theta, config.G, config.softening
        tree_solver = BarnesHutGravity.from_config(
            config, use_root_extent="root_extent" in config.model_fields_set
        )
    else:
        tree_solver = BarnesHutGravity(G=G, theta=theta)
    t0 = time.perf_counter()
    acc_tree = tree_solver.compute_acceleration(positions, masses, softening)
    tree_time = time.perf_counter() - t0

    direct_solver = NewtonianGravity(G=G)
    t0 = time.perf_counter()
    acc_direct = direct_solver.compute_acceleration(positions, masses, softening)
    direct_time = time.perf_counter() - t0

    errors = relative_errors(acc_tree, acc_direct)
    tree = tree_solver.get_tree_data()

    return ForceComparison(
        n_bodies=len(positions),
        theta=float(theta),
        max_relative_error=float(np.max(errors)),
        mean_relative_error=float(np.mean(errors)),
        median_relative_error=float(np.median(errors)),
        tree_time=tree_time,
        direct_time=direct_time,
        node_count=tree.node_count(),
        tree_depth=tree.depth(),
    )
