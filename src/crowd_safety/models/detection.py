"""
Detection data models - bounding boxes, detections and frame observations.

These are the input side of the analyzer. Boxes validate themselves on
construction so that nothing degenerate ever reaches tracking or the grid.
"""

import math
from dataclasses import dataclass, field
from enum import Enum


class InvalidDetectionError(ValueError):
    """Raised when a detection's bounding box is degenerate or non-finite."""


class DetectionKind(str, Enum):
    """Kind of detected object. Only persons feed the analyzer."""

    PERSON = "PERSON"
    OTHER = "OTHER"


@dataclass(frozen=True)
class BoundingBox:
    """
    Normalized bounding box.

    Attributes:
        left: Left edge as a fraction of frame width
        top: Top edge as a fraction of frame height
        right: Right edge, must be > left
        bottom: Bottom edge, must be > top
    """

    left: float
    top: float
    right: float
    bottom: float

    def __post_init__(self):
        coords = (self.left, self.top, self.right, self.bottom)
        if not all(isinstance(c, (int, float)) and math.isfinite(c) for c in coords):
            raise InvalidDetectionError(f"Non-finite bounding box: {coords}")
        if self.left >= self.right:
            raise InvalidDetectionError(
                f"Degenerate bounding box: left ({self.left}) >= right ({self.right})"
            )
        if self.top >= self.bottom:
            raise InvalidDetectionError(
                f"Degenerate bounding box: top ({self.top}) >= bottom ({self.bottom})"
            )

    def to_dict(self) -> dict[str, float]:
        return {
            "left": self.left,
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom,
        }


@dataclass(frozen=True)
class Detection:
    """A single detected object in one frame."""

    kind: DetectionKind
    bbox: BoundingBox
    label: str | None = None
    confidence: float | None = None

    @property
    def is_person(self) -> bool:
        return self.kind is DetectionKind.PERSON


@dataclass(frozen=True)
class FrameObservation:
    """
    All detections for one video frame.

    Attributes:
        frame_id: Opaque frame identifier from the upstream pipeline
        timestamp_ms: Capture time in milliseconds (expected to increase)
        detections: Detections in the order the vision service reported them
    """

    frame_id: str
    timestamp_ms: float
    detections: tuple[Detection, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any iterable but store immutably
        if not isinstance(self.detections, tuple):
            object.__setattr__(self, "detections", tuple(self.detections))

    def persons(self) -> list[Detection]:
        """Person detections only, in reported order."""
        return [d for d in self.detections if d.is_person]
