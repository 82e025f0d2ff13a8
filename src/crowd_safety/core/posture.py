"""
Motion/Posture Classifier - falling (tracked motion) and lying (box shape).
"""

import logging
from collections.abc import Iterable

from ..config.schemas import AnalyzerConfig
from ..models import (
    FallingPersonEvent,
    FrameObservation,
    LyingPersonEvent,
    PersonTrack,
    TrackPosition,
)
from ..utils.geometry import aspect_ratio, distance

logger = logging.getLogger(__name__)


def overall_velocity(positions: list[TrackPosition]) -> float:
    """Straight-line speed from first to last position (units/s), 0 if no time elapsed."""
    if len(positions) < 2:
        return 0.0

    first, last = positions[0], positions[-1]
    elapsed = (last.timestamp_ms - first.timestamp_ms) / 1000
    if elapsed <= 0:
        return 0.0

    return distance(first.x, first.y, last.x, last.y) / elapsed


class MotionClassifier:
    """Detects falling persons from track motion and lying persons from box shape."""

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()

    def detect_falling(self, tracks: Iterable[PersonTrack]) -> list[FallingPersonEvent]:
        """
        Report tracks that just started falling.

        Latches track.is_falling on every track reported, so a track is
        reported at most once for its lifetime.

        Args:
            tracks: Active person tracks

        Returns:
            One event per newly falling track
        """
        events = []
        window = self.config.falling_window

        for track in tracks:
            if track.is_falling or len(track.positions) < window:
                continue

            positions = track.positions[-window:]
            if not self._has_rapid_descent(track.track_id, positions):
                continue

            track.is_falling = True
            last = positions[-1]
            events.append(
                FallingPersonEvent(
                    track_id=track.track_id,
                    position=last,
                    velocity=overall_velocity(positions),
                    timestamp_ms=last.timestamp_ms,
                )
            )
            logger.info(f"Falling person detected: track {track.track_id}")

        return events

    def _has_rapid_descent(self, track_id: str, positions: list[TrackPosition]) -> bool:
        """True if any consecutive pair moves down faster than the threshold."""
        for prev, curr in zip(positions, positions[1:]):
            elapsed = (curr.timestamp_ms - prev.timestamp_ms) / 1000
            if elapsed <= 0:
                logger.debug(
                    f"Track {track_id}: rejected position pair with non-positive "
                    f"time delta ({elapsed:.3f}s)"
                )
                continue

            vertical_velocity = (curr.y - prev.y) / elapsed
            if vertical_velocity > self.config.falling_velocity_threshold:
                return True

        return False

    def detect_lying(self, frame: FrameObservation) -> list[LyingPersonEvent]:
        """
        Report person detections wider than they are tall.

        Args:
            frame: Frame with validated detections

        Returns:
            One event per lying person detection
        """
        threshold = self.config.lying_aspect_ratio
        events = []

        for person in frame.persons():
            ratio = aspect_ratio(person.bbox)
            if ratio > threshold:
                events.append(
                    LyingPersonEvent(
                        bbox=person.bbox,
                        aspect_ratio=ratio,
                        confidence=min(ratio / threshold, 1.0),
                        timestamp_ms=frame.timestamp_ms,
                    )
                )

        return events
