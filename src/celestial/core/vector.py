"""
Immutable 3-vector used for positions and forces.
"""

from dataclasses import dataclass
import math
import numpy as np
import numpy.typing as npt


@dataclass(frozen=True)
class Vector3:
    """
    Cartesian 3-vector with float64 components.

    Supports component-wise addition/subtraction, scalar scaling and the
    usual metric helpers. Instances are hashable and compare exactly.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def zero(cls) -> "Vector3":
        """Additive identity."""
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_array(cls, a: npt.ArrayLike) -> "Vector3":
        arr = np.asarray(a, dtype=np.float64)
        if arr.shape != (3,):
            raise ValueError(f"Vector3 requires shape (3,), got {arr.shape}")
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def plus(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def minus(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scaled(self, k: float) -> "Vector3":
        return Vector3(self.x * k, self.y * k, self.z * k)

    def dot(self, other: "Vector3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def norm(self) -> float:
        return math.sqrt(self.dot(self))

    def distance_to(self, other: "Vector3") -> float:
        return self.minus(other).norm()

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def __add__(self, other: "Vector3") -> "Vector3":
        return self.plus(other)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return self.minus(other)

    def __mul__(self, k: float) -> "Vector3":
        return self.scaled(k)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z
