"""
I/O module: diagnostic comparisons.
"""

from celestial.io.diagnostics import ForceComparison, compare_with_direct, relative_errors

__all__ = ["ForceComparison", "compare_with_direct", "relative_errors"]
