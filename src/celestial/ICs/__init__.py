"""
Initial conditions module: body distributions for force tests and benchmarks.
"""

from celestial.ICs.uniform import UniformSphere
from celestial.ICs.plummer import PlummerSphere

__all__ = ["UniformSphere", "PlummerSphere"]
