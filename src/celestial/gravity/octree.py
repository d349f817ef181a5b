"""
Octree used to implement the Barnes-Hut algorithm in 3D space.

Bodies are inserted one at a time into an adaptively subdividing tree of
cubic regions. Every node keeps an ``approximation``: for a leaf this is the
real body it holds, for an internal node it is the merged body (total mass
at the center of mass) of its whole subtree, updated incrementally on each
insertion.

Octant indexing, index as decimal -> octant coordinates as bits [x, y, z]:

    e.g. index 3 -> [0, 1, 1], i.e. x on the negative side, y and z positive.

A child's center is offset from its parent's by ±extent/4 along each axis
according to those bits; its extent is half the parent's.

Reference:
    Barnes & Hut (1986) - A Hierarchical O(N log N) Force-Calculation Algorithm
"""

from abc import ABC, abstractmethod
from typing import Iterable, Iterator, List, Optional
import warnings

from celestial.core.interfaces import Body
from celestial.core.vector import Vector3

# Constants
THETA = 0.5               # Opening-angle criterion (0.5-0.7 is standard)
G_CONST = 1.0             # Default G
DEFAULT_MAX_DEPTH = 64    # Below this many halvings, coincident bodies share a leaf
N_OCTANTS = 8


class EmptyTreeError(RuntimeError):
    """Raised when querying an octree that holds no bodies."""

    def __init__(self, message: str = "Tree has no bodies"):
        super().__init__(message)


class BodyOutOfBoundsError(ValueError):
    """Raised by strict trees when a body lies outside the root cube."""


def cube_contains(center: Vector3, extent: float, position: Vector3) -> bool:
    """Check if a point lies within the cube of side ``extent`` (boundary included)."""
    half = extent / 2.0
    return (
        abs(position.x - center.x) <= half
        and abs(position.y - center.y) <= half
        and abs(position.z - center.z) <= half
    )


def child_center(center: Vector3, extent: float, octant: int) -> Vector3:
    """
    Center of the child region ``octant`` of a node.

    Parameters
    ----------
    center : Vector3
        Center of the parent region.
    extent : float
        Side length of the parent region.
    octant : int
        Octant index in [0, 7].
    """
    offset = extent / 4.0
    return center.plus(Vector3(
        offset if octant & 4 else -offset,
        offset if octant & 2 else -offset,
        offset if octant & 1 else -offset,
    ))


class OctreeNode(ABC):
    """
    Cubic region of an octree: either an ``OctreeLeaf`` or an ``OctreeInternal``.

    Attributes
    ----------
    extent : float
        Side length of the region.
    center : Vector3
        Geometric center of the region.
    depth : int
        Number of halvings from the root (root is 0).
    approximation : Body
        The real body of a leaf, or the aggregate of an internal node's subtree.
    """

    def __init__(self, extent: float, center: Vector3, depth: int, approximation: Body):
        self.extent = extent
        self.center = center
        self.depth = depth
        self.approximation = approximation

    @property
    @abstractmethod
    def is_leaf(self) -> bool:
        pass

    @abstractmethod
    def insert(self, body: Body, max_depth: Optional[int] = DEFAULT_MAX_DEPTH) -> "OctreeNode":
        """
        Add a body to this region.

        Returns
        -------
        node : OctreeNode
            The node that now represents this region. A leaf that had to be
            split returns a new internal node; callers must store it in
            place of this one.
        """
        pass

    @abstractmethod
    def bodies(self) -> Iterator[Body]:
        """Yield every real body in this region, depth first."""
        pass

    @abstractmethod
    def node_count(self) -> int:
        pass

    @abstractmethod
    def height(self) -> int:
        """Deepest node depth below and including this one."""
        pass

    @abstractmethod
    def _exact_force(self, body: Body, theta: float, G: float, softening: float) -> Vector3:
        pass

    @abstractmethod
    def _exact_potential(self, body: Body, theta: float, G: float, softening: float) -> float:
        pass

    def contains(self, position: Vector3) -> bool:
        """Check if a point lies within this node's cube (boundary included)."""
        return cube_contains(self.center, self.extent, position)

    def _is_far(self, body: Body, theta: float) -> bool:
        # s/d < theta, a zero distance never qualifies
        d = body.distance_to(self.approximation)
        return d > 0.0 and self.extent / d < theta

    def force_on(
        self,
        body: Body,
        theta: float = THETA,
        G: float = G_CONST,
        softening: float = 0.0
    ) -> Vector3:
        """
        Gravitational force on ``body`` from every body in this region.

        If the region subtends an angle below ``theta`` as seen from the
        body, its approximation is used as a single attracting mass.
        Otherwise leaves compute the exact force and internal nodes sum
        over their children. No self exclusion is performed.
        """
        if self._is_far(body, theta):
            return body.gravitational_force(self.approximation, G, softening)
        return self._exact_force(body, theta, G, softening)

    def potential_at(
        self,
        body: Body,
        theta: float = THETA,
        G: float = G_CONST,
        softening: float = 0.0
    ) -> float:
        """Potential per unit mass at ``body``, using the same opening criterion."""
        if self._is_far(body, theta):
            return body.gravitational_potential(self.approximation, G, softening)
        return self._exact_potential(body, theta, G, softening)


class OctreeLeaf(OctreeNode):
    """
    Region holding a single real body.

    Only when the depth limit is reached may a leaf hold several bodies; its
    approximation is then their incremental merge.
    """

    def __init__(
        self,
        extent: float,
        center: Vector3,
        depth: int,
        bodies: List[Body],
        approximation: Body
    ):
        super().__init__(extent, center, depth, approximation)
        self._bodies = bodies

    @classmethod
    def of(cls, body: Body, extent: float, center: Vector3, depth: int = 0) -> "OctreeLeaf":
        """Create a leaf representing exactly ``body``."""
        return cls(extent, center, depth, [body], body)

    @property
    def is_leaf(self) -> bool:
        return True

    @property
    def body_count(self) -> int:
        return len(self._bodies)

    def insert(self, body: Body, max_depth: Optional[int] = DEFAULT_MAX_DEPTH) -> OctreeNode:
        if max_depth is not None and self.depth >= max_depth:
            warnings.warn(
                f"Octree depth limit ({max_depth}) reached; "
                "coincident bodies are stored in a shared leaf",
                RuntimeWarning,
            )
            self._bodies.append(body)
            self.approximation = self.approximation.merge(body)
            return self

        # Demote: push the existing body down, then the new one
        node = OctreeInternal(self.extent, self.center, self.depth, self.approximation)
        for existing in self._bodies:
            node._place(existing, max_depth)
        node._place(body, max_depth)
        node.approximation = self.approximation.merge(body)
        return node

    def bodies(self) -> Iterator[Body]:
        yield from self._bodies

    def node_count(self) -> int:
        return 1

    def height(self) -> int:
        return self.depth

    def _exact_force(self, body: Body, theta: float, G: float, softening: float) -> Vector3:
        if len(self._bodies) == 1:
            return body.gravitational_force(self.approximation, G, softening)
        force = Vector3.zero()
        for member in self._bodies:
            force = force.plus(body.gravitational_force(member, G, softening))
        return force

    def _exact_potential(self, body: Body, theta: float, G: float, softening: float) -> float:
        return sum(body.gravitational_potential(member, G, softening) for member in self._bodies)

    def __repr__(self) -> str:
        return f"OctreeLeaf(depth={self.depth}, extent={self.extent}, bodies={len(self._bodies)})"


class OctreeInternal(OctreeNode):
    """Region split into up to eight populated child regions."""

    def __init__(
        self,
        extent: float,
        center: Vector3,
        depth: int,
        approximation: Body,
        children: Optional[List[Optional[OctreeNode]]] = None
    ):
        super().__init__(extent, center, depth, approximation)
        self.children: List[Optional[OctreeNode]] = (
            children if children is not None else [None] * N_OCTANTS
        )

    @property
    def is_leaf(self) -> bool:
        return False

    def insert(self, body: Body, max_depth: Optional[int] = DEFAULT_MAX_DEPTH) -> OctreeNode:
        self._place(body, max_depth)
        self.approximation = self.approximation.merge(body)
        return self

    def _place(self, body: Body, max_depth: Optional[int]) -> None:
        """Add a body to its child region, creating the child if absent."""
        octant = body.octant_index(self.center)
        child = self.children[octant]
        if child is None:
            self.children[octant] = OctreeLeaf.of(
                body,
                self.extent / 2.0,
                child_center(self.center, self.extent, octant),
                self.depth + 1,
            )
        else:
            self.children[octant] = child.insert(body, max_depth)

    def populated(self) -> Iterable[OctreeNode]:
        return (child for child in self.children if child is not None)

    def bodies(self) -> Iterator[Body]:
        for child in self.populated():
            yield from child.bodies()

    def node_count(self) -> int:
        return 1 + sum(child.node_count() for child in self.populated())

    def height(self) -> int:
        return max(child.height() for child in self.populated())

    def _exact_force(self, body: Body, theta: float, G: float, softening: float) -> Vector3:
        force = Vector3.zero()
        for child in self.populated():
            force = force.plus(child.force_on(body, theta, G, softening))
        return force

    def _exact_potential(self, body: Body, theta: float, G: float, softening: float) -> float:
        return sum(child.potential_at(body, theta, G, softening) for child in self.populated())

    def __repr__(self) -> str:
        n_children = sum(1 for _ in self.populated())
        return f"OctreeInternal(depth={self.depth}, extent={self.extent}, children={n_children})"


class Octree:
    """
    Barnes-Hut octree over a cube of side ``root_extent`` centered at the origin.

    Usage:
        tree = Octree(root_extent=4.0, theta=0.5)
        for body in bodies:
            tree.insert(body)
        force = tree.force_on(probe)

    The theta parameter controls the accuracy/speed tradeoff:
    - theta = 0: Exact calculation (no approximation)
    - theta = 0.5: Good balance (recommended)
    - theta = 1.0+: Fast but less accurate

    A body that is itself in the tree is included in its own force sum; its
    own leaf contributes nothing, but its mass is part of any accepted
    aggregate containing it. Query with bodies not yet inserted, or keep
    theta at or below 1/sqrt(3), where a cell containing the query is never
    accepted.
    """

    def __init__(
        self,
        root_extent: float,
        theta: float = THETA,
        G: float = G_CONST,
        softening: float = 0.0,
        max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
        strict_bounds: bool = False,
        verbose: bool = False
    ):
        """
        Initialize an empty octree.

        Parameters
        ----------
        root_extent : float
            Side length of the root cube; must enclose every inserted body.
        theta : float
            Default opening angle for force queries.
        G : float
            Gravitational constant.
        softening : float
            Plummer softening length applied to every pairwise interaction.
        max_depth : Optional[int]
            Depth at which leaves stop splitting and store several bodies.
            None allows unbounded depth, in which case coincident bodies
            exhaust the recursion limit.
        strict_bounds : bool
            Reject bodies outside the root cube instead of warning.
        verbose : bool
            Print build messages.
        """
        if not root_extent > 0.0:
            raise ValueError(f"root_extent must be positive, got {root_extent}")
        if not theta >= 0.0:
            raise ValueError(f"theta must be non-negative, got {theta}")
        if not G > 0.0:
            raise ValueError(f"G must be positive, got {G}")
        if not softening >= 0.0:
            raise ValueError(f"softening must be non-negative, got {softening}")
        if max_depth is not None and max_depth < 1:
            raise ValueError(f"max_depth must be at least 1 or None, got {max_depth}")

        self.root_extent = float(root_extent)
        self.theta = float(theta)
        self.G = float(G)
        self.softening = float(softening)
        self.max_depth = max_depth
        self.strict_bounds = strict_bounds
        self.verbose = verbose

        self.root: Optional[OctreeNode] = None
        self._n_bodies = 0

    @classmethod
    def from_config(cls, config) -> "Octree":
        """Create an empty tree from an ``OctreeConfig``."""
        return cls(
            root_extent=config.root_extent,
            theta=config.theta,
            G=config.G,
            softening=config.softening,
            max_depth=config.max_depth,
            strict_bounds=config.strict_bounds,
            verbose=config.verbose,
        )

    @classmethod
    def from_bodies(
        cls,
        bodies: Iterable[Body],
        root_extent: Optional[float] = None,
        padding: float = 0.01,
        **kwargs
    ) -> "Octree":
        """
        Build a tree holding ``bodies``.

        Parameters
        ----------
        bodies : Iterable[Body]
            Bodies to insert, in order.
        root_extent : Optional[float]
            Root cube size; by default the smallest origin-centered cube
            enclosing every body, enlarged by ``padding``.
        **kwargs
            Passed to the constructor (theta, G, softening, ...).
        """
        bodies = list(bodies)
        if root_extent is None:
            max_abs = max(
                (abs(c) for body in bodies for c in body.position),
                default=0.0,
            )
            root_extent = 2.0 * max_abs * (1.0 + padding) if max_abs > 0.0 else 1.0

        tree = cls(root_extent, **kwargs)
        for body in bodies:
            tree.insert(body)
        tree._log(
            f"Built octree: {len(tree)} bodies, {tree.node_count()} nodes, "
            f"depth {tree.depth()}"
        )
        return tree

    def insert(self, body: Body) -> None:
        """
        Add a body to the tree.

        The first body becomes a root leaf of ``root_extent`` at the origin;
        later bodies are delegated to the root.
        """
        self._check_bounds(body)
        if self.root is None:
            self.root = OctreeLeaf.of(body, self.root_extent, Vector3.zero())
            self._log(f"Root created: extent {self.root_extent}")
        else:
            self.root = self.root.insert(body, self.max_depth)
        self._n_bodies += 1

    def _check_bounds(self, body: Body) -> None:
        if cube_contains(Vector3.zero(), self.root_extent, body.position):
            return
        message = (
            f"Body at {tuple(body.position)} lies outside the root cube "
            f"of extent {self.root_extent}"
        )
        if self.strict_bounds:
            raise BodyOutOfBoundsError(message)
        warnings.warn(message + "; octant placement will be geometrically meaningless")

    def _require_root(self) -> OctreeNode:
        if self.root is None:
            raise EmptyTreeError()
        return self.root

    def force_on(self, body: Body, theta: Optional[float] = None) -> Vector3:
        """
        Approximate gravitational force on ``body`` from the bodies in the tree.

        Parameters
        ----------
        body : Body
            Query body.
        theta : Optional[float]
            Opening angle for this query; defaults to the tree's theta.

        Raises
        ------
        EmptyTreeError
            If no body has been inserted.
        """
        root = self._require_root()
        theta = self.theta if theta is None else theta
        return root.force_on(body, theta, self.G, self.softening)

    def potential_at(self, body: Body, theta: Optional[float] = None) -> float:
        """Approximate potential per unit mass at ``body``."""
        root = self._require_root()
        theta = self.theta if theta is None else theta
        return root.potential_at(body, theta, self.G, self.softening)

    def bodies(self) -> Iterator[Body]:
        """
        Lazily enumerate every real body, depth first.

        Raises
        ------
        EmptyTreeError
            Immediately, if no body has been inserted.
        """
        return self._require_root().bodies()

    def __iter__(self) -> Iterator[Body]:
        return self.bodies()

    def __len__(self) -> int:
        return self._n_bodies

    @property
    def is_empty(self) -> bool:
        return self.root is None

    @property
    def aggregate(self) -> Body:
        """Merged body of the whole tree (total mass at the center of mass)."""
        return self._require_root().approximation

    def node_count(self) -> int:
        return 0 if self.root is None else self.root.node_count()

    def depth(self) -> int:
        return 0 if self.root is None else self.root.height()

    def _log(self, message: str):
        """Log message if verbose."""
        if self.verbose:
            print(f"[Octree] {message}")

    def __repr__(self) -> str:
        return (
            f"Octree(root_extent={self.root_extent}, theta={self.theta}, "
            f"bodies={self._n_bodies})"
        )
