"""
Utility modules for constants and geometry.
"""

from .constants import (
    DENSITY_GRID_SIZE,
    DENSITY_THRESHOLD,
    MAX_FRAME_HISTORY,
    SURGE_THRESHOLD,
)
from .geometry import aspect_ratio, bbox_center, distance

__all__ = [
    "DENSITY_GRID_SIZE",
    "DENSITY_THRESHOLD",
    "MAX_FRAME_HISTORY",
    "SURGE_THRESHOLD",
    # Geometry
    "aspect_ratio",
    "bbox_center",
    "distance",
]
