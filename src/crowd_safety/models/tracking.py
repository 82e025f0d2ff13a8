"""
Tracking data models - person tracks and their position history.
"""

from dataclasses import dataclass, field


@dataclass
class TrackPosition:
    """Center position of a person at one instant."""

    x: float
    y: float
    timestamp_ms: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "timestamp_ms": self.timestamp_ms}


@dataclass
class PersonTrack:
    """
    Represents one person followed across frames.

    Attributes:
        track_id: Unique identifier for the lifetime of the owning tracker
        positions: Recent center positions, oldest first
        last_seen_ms: Timestamp of the most recent matched detection
        is_falling: Latched once a fall is reported; never cleared
    """

    track_id: str
    positions: list[TrackPosition] = field(default_factory=list)
    last_seen_ms: float = 0.0
    is_falling: bool = False

    @property
    def last_position(self) -> TrackPosition | None:
        return self.positions[-1] if self.positions else None

    def add_position(self, x: float, y: float, timestamp_ms: float) -> None:
        """Append a position and mark the track as seen at timestamp_ms."""
        self.positions.append(TrackPosition(x, y, timestamp_ms))
        self.last_seen_ms = timestamp_ms

    def prune_positions(self, now_ms: float, window_ms: float) -> None:
        """Drop positions at least window_ms older than now_ms."""
        self.positions = [p for p in self.positions if now_ms - p.timestamp_ms < window_ms]

    def is_stale(self, now_ms: float, timeout_ms: float) -> bool:
        return now_ms - self.last_seen_ms > timeout_ms
