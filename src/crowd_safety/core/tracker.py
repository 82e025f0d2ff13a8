"""
PersonTracker - Persistent person identities across frames.

Maintains a table of person tracks keyed by track id. Updated once per
frame, then read by the motion classifier.

Association is greedy nearest-neighbour, evaluated independently for each
detection: two detections in the same frame can extend the same track.
"""

import itertools
import logging
import secrets

from ..config.schemas import AnalyzerConfig
from ..models import FrameObservation, PersonTrack
from ..utils.geometry import bbox_center, distance

logger = logging.getLogger(__name__)


class PersonTracker:
    """
    Tracks persons by matching detection centers to recent track positions.

    Tracks unseen for longer than track_timeout_ms are evicted at the start
    of each update. A detection further than match_distance from every
    track starts a new track.
    """

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()
        self._tracks: dict[str, PersonTrack] = {}
        self._id_counter = itertools.count(1)

    def update(self, frame: FrameObservation) -> None:
        """
        Update track table from one frame.

        Args:
            frame: Frame with validated detections
        """
        now = frame.timestamp_ms
        self._evict_stale(now)

        for person in frame.persons():
            center_x, center_y = bbox_center(person.bbox)
            track = self._find_nearest(center_x, center_y)

            if track is not None:
                track.add_position(center_x, center_y, now)
                track.prune_positions(now, self.config.position_window_ms)
            else:
                track = PersonTrack(track_id=self._new_track_id())
                track.add_position(center_x, center_y, now)
                self._tracks[track.track_id] = track
                logger.debug(
                    f"New track {track.track_id} at ({center_x:.3f}, {center_y:.3f})"
                )

    def _evict_stale(self, now: float) -> None:
        stale = [
            track_id
            for track_id, track in self._tracks.items()
            if track.is_stale(now, self.config.track_timeout_ms)
        ]
        for track_id in stale:
            del self._tracks[track_id]
        if stale:
            logger.debug(f"Evicted {len(stale)} stale track(s)")

    def _find_nearest(self, x: float, y: float) -> PersonTrack | None:
        """Closest track within match_distance; earliest-inserted wins ties."""
        closest = None
        min_distance = self.config.match_distance

        for track in self._tracks.values():
            last = track.last_position
            if last is None:
                continue
            d = distance(x, y, last.x, last.y)
            if d < min_distance:
                min_distance = d
                closest = track

        return closest

    def _new_track_id(self) -> str:
        return f"person_{next(self._id_counter)}_{secrets.token_hex(4)}"

    @property
    def tracks(self) -> list[PersonTrack]:
        """All active tracks in insertion order."""
        return list(self._tracks.values())

    def get(self, track_id: str) -> PersonTrack | None:
        return self._tracks.get(track_id)

    def clear(self) -> None:
        self._tracks.clear()

    def __len__(self) -> int:
        return len(self._tracks)
