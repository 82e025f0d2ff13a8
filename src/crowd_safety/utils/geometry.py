"""
Geometry helpers for normalized bounding boxes.

All coordinates are fractions of frame width/height in [0, 1].
"""

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import BoundingBox


def bbox_center(bbox: "BoundingBox") -> tuple[float, float]:
    """Center point (x, y) of a bounding box."""
    return (bbox.left + bbox.right) / 2, (bbox.top + bbox.bottom) / 2


def aspect_ratio(bbox: "BoundingBox") -> float:
    """Width over height. Boxes are validated non-degenerate on construction."""
    return (bbox.right - bbox.left) / (bbox.bottom - bbox.top)


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


__all__ = ["aspect_ratio", "bbox_center", "distance"]
