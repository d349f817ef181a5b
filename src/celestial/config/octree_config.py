"""
Octree configuration with Pydantic validation.
"""

from typing import Optional
import warnings
from pydantic import BaseModel, Field, model_validator, ConfigDict


class OctreeConfig(BaseModel):
    """
    Configuration for a Barnes-Hut octree.

    Attributes
    ----------
    root_extent : float
        Side length of the origin-centered root cube.
    theta : float
        Opening angle; 0 disables the approximation.
    G : float
        Gravitational constant.
    softening : float
        Plummer softening length.
    max_depth : Optional[int]
        Depth at which leaves stop splitting; None for unbounded depth.
    strict_bounds : bool
        Reject bodies outside the root cube instead of warning.
    verbose : bool
        Print build messages.
    """

    # Tree geometry
    root_extent: float = Field(default=1.0, gt=0.0, description="Root cube side length")
    max_depth: Optional[int] = Field(
        default=64,
        ge=1,
        description="Maximum subdivision depth (None = unbounded)"
    )
    strict_bounds: bool = Field(
        default=False,
        description="Raise on bodies outside the root cube"
    )

    # Gravity
    theta: float = Field(default=0.5, ge=0.0, description="Barnes-Hut opening angle")
    G: float = Field(default=1.0, gt=0.0, description="Gravitational constant")
    softening: float = Field(default=0.0, ge=0.0, description="Plummer softening length")

    # Misc
    verbose: bool = Field(default=False, description="Enable verbose logging")

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",  # Raise error on unknown fields
    )

    @model_validator(mode='after')
    def validate_configuration_consistency(self):
        """Warn about valid but unusual accuracy settings."""
        if self.theta == 0.0:
            warnings.warn(
                "theta=0 disables the Barnes-Hut approximation; "
                "force queries cost O(N) per body."
            )
        elif self.theta > 1.0:
            warnings.warn(
                f"theta={self.theta} > 1 accepts cells larger than their distance "
                "from the query body; accuracy degrades quickly."
            )

        if self.softening > self.root_extent:
            warnings.warn(
                f"softening ({self.softening}) exceeds root_extent ({self.root_extent}); "
                "forces will be strongly suppressed."
            )

        return self
