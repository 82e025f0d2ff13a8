"""
Safety Analyzer - per-stream coordinator.

Runs every component for each incoming frame and returns the combined
SafetyAnalysis. One instance owns all mutable state for one video stream.

Processing is single-writer: process_frame holds an instance lock for the
whole frame, so concurrent callers on the same stream are serialized.
Separate instances share nothing and may run in parallel.
"""

import logging
import threading

from ..config.schemas import AnalyzerConfig
from ..models import AnalyzerStats, FrameObservation, SafetyAnalysis, SafetyStatus
from .density import DensityGridAnalyzer
from .history import FrameHistory
from .posture import MotionClassifier
from .status import aggregate
from .surge import SurgeDetector
from .tracker import PersonTracker

logger = logging.getLogger(__name__)


class SafetyAnalyzer:
    """
    Crowd safety analysis for one video stream.

    Example:
        analyzer = SafetyAnalyzer()
        analysis = analyzer.process_frame(frame)
        if analysis.overall_safety_status is SafetyStatus.CRITICAL:
            ...
    """

    def __init__(self, config: AnalyzerConfig | None = None, name: str = "default"):
        self.config = config or AnalyzerConfig()
        self.name = name

        self.frame_history = FrameHistory(self.config.max_frame_history)
        self.tracker = PersonTracker(self.config)
        self.density = DensityGridAnalyzer(self.config)
        self.surge_detector = SurgeDetector(self.config)
        self.classifier = MotionClassifier(self.config)

        self._lock = threading.Lock()

    def process_frame(self, frame: FrameObservation) -> SafetyAnalysis:
        """
        Analyze one frame.

        Args:
            frame: Frame observation with validated detections

        Returns:
            SafetyAnalysis with surges, falls, lying persons and overall status
        """
        with self._lock:
            self.frame_history.append(frame)
            self.tracker.update(frame)
            self.density.record(frame)

            surges = self.surge_detector.detect(self.density.history[-2:])
            falls = self.classifier.detect_falling(self.tracker.tracks)
            lies = self.classifier.detect_lying(frame)
            status = aggregate(surges, falls, lies)
            track_count = len(self.tracker)

        logger.debug(
            f"[{self.name}] frame {frame.frame_id}: {len(frame.detections)} detection(s), "
            f"{track_count} track(s), {len(surges)} surge(s), "
            f"{len(falls)} fall(s), {len(lies)} lying"
        )
        if status is not SafetyStatus.SAFE:
            logger.warning(
                f"[{self.name}] {status.value} at frame {frame.frame_id}: "
                f"{len(surges)} surge(s), {len(falls)} fall(s), {len(lies)} lying"
            )

        return SafetyAnalysis(
            frame_id=frame.frame_id,
            timestamp_ms=frame.timestamp_ms,
            density_surges=surges,
            falling_persons=falls,
            lying_persons=lies,
            overall_safety_status=status,
        )

    def get_stats(self) -> AnalyzerStats:
        """Current statistics. Read-only."""
        with self._lock:
            latest_frame = self.frame_history.latest
            latest_snapshot = self.density.latest
            return AnalyzerStats(
                active_track_count=len(self.tracker),
                frame_history_length=len(self.frame_history),
                density_cell_count=len(latest_snapshot) if latest_snapshot else 0,
                density_history_length=len(self.density.history),
                last_analysis_timestamp=latest_frame.timestamp_ms if latest_frame else None,
            )

    def reset(self) -> None:
        """Drop all tracks and history (e.g. after a stream restart)."""
        with self._lock:
            self.frame_history.clear()
            self.tracker.clear()
            self.density.clear()
        logger.info(f"[{self.name}] analyzer state reset")
