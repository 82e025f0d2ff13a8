"""
Safety event models - density cells, derived events and analysis results.

Events are built fresh for every processed frame and handed back to the
caller. Nothing here is persisted by the analyzer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .detection import BoundingBox
from .tracking import TrackPosition


class Severity(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"


class SafetyStatus(str, Enum):
    SAFE = "SAFE"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class DensityCell:
    """
    Person density in one grid cell for one frame.

    Attributes:
        i: Column index (x direction)
        j: Row index (y direction)
        x, y, width, height: Normalized cell geometry
        person_count: Person centers falling inside the cell
        density: person_count / (width * height)
        timestamp_ms: Timestamp of the frame this cell belongs to
    """

    i: int
    j: int
    x: float
    y: float
    width: float
    height: float
    person_count: int
    density: float
    timestamp_ms: float

    def geometry(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class DensitySurgeEvent:
    """Sudden density increase in one cell between consecutive frames."""

    cell: DensityCell
    current_density: float
    previous_density: float
    increase_percent: float | None  # None when previous density was zero
    severity: Severity
    timestamp_ms: float

    event_type = "DENSITY_SURGE"

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type,
            "zone": self.cell.geometry(),
            "grid_cell": [self.cell.i, self.cell.j],
            "current_density": self.current_density,
            "previous_density": self.previous_density,
            "increase_percent": self.increase_percent,
            "severity": self.severity.value,
            "timestamp_ms": self.timestamp_ms,
        }


@dataclass(frozen=True)
class FallingPersonEvent:
    """Rapid downward motion of a tracked person."""

    track_id: str
    position: TrackPosition
    velocity: float
    timestamp_ms: float
    severity: Severity = Severity.HIGH

    event_type = "FALLING_PERSON"

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type,
            "track_id": self.track_id,
            "position": self.position.to_dict(),
            "velocity": round(self.velocity, 3),
            "severity": self.severity.value,
            "timestamp_ms": self.timestamp_ms,
        }


@dataclass(frozen=True)
class LyingPersonEvent:
    """Person detection whose box is much wider than tall."""

    bbox: BoundingBox
    aspect_ratio: float
    confidence: float
    timestamp_ms: float
    severity: Severity = Severity.MEDIUM

    event_type = "LYING_PERSON"

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type,
            "bbox": self.bbox.to_dict(),
            "aspect_ratio": round(self.aspect_ratio, 2),
            "confidence": self.confidence,
            "severity": self.severity.value,
            "timestamp_ms": self.timestamp_ms,
        }


@dataclass
class SafetyAnalysis:
    """Result of analysing one frame."""

    frame_id: str
    timestamp_ms: float
    density_surges: list[DensitySurgeEvent] = field(default_factory=list)
    falling_persons: list[FallingPersonEvent] = field(default_factory=list)
    lying_persons: list[LyingPersonEvent] = field(default_factory=list)
    overall_safety_status: SafetyStatus = SafetyStatus.SAFE

    def has_incidents(self) -> bool:
        return bool(self.density_surges or self.falling_persons or self.lying_persons)

    def to_dict(self) -> dict[str, Any]:
        return {
            "frame_id": self.frame_id,
            "timestamp_ms": self.timestamp_ms,
            "density_surges": [e.to_dict() for e in self.density_surges],
            "falling_persons": [e.to_dict() for e in self.falling_persons],
            "lying_persons": [e.to_dict() for e in self.lying_persons],
            "overall_safety_status": self.overall_safety_status.value,
        }


@dataclass(frozen=True)
class AnalyzerStats:
    """Point-in-time statistics for one analyzer (one stream)."""

    active_track_count: int
    frame_history_length: int
    density_cell_count: int
    density_history_length: int
    last_analysis_timestamp: float | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "active_track_count": self.active_track_count,
            "frame_history_length": self.frame_history_length,
            "density_cell_count": self.density_cell_count,
            "density_history_length": self.density_history_length,
            "last_analysis_timestamp": self.last_analysis_timestamp,
        }
