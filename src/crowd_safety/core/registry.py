"""
Analyzer Registry - one SafetyAnalyzer per monitored stream.
"""

import logging
import threading

from ..config.schemas import AnalyzerConfig
from ..models import AnalyzerStats, FrameObservation, SafetyAnalysis
from .analyzer import SafetyAnalyzer

logger = logging.getLogger(__name__)


class AnalyzerRegistry:
    """
    Maps stream ids to their analyzers, creating them on first use.

    The registry lock only guards the mapping. Frame processing runs under
    each analyzer's own lock, so different streams never block each other.
    """

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()
        self._analyzers: dict[str, SafetyAnalyzer] = {}
        self._lock = threading.Lock()

    def get(self, stream_id: str) -> SafetyAnalyzer:
        """Analyzer for stream_id, created if missing."""
        with self._lock:
            analyzer = self._analyzers.get(stream_id)
            if analyzer is None:
                analyzer = SafetyAnalyzer(self.config, name=stream_id)
                self._analyzers[stream_id] = analyzer
                logger.info(f"Created analyzer for stream: {stream_id}")
            return analyzer

    def process_frame(self, stream_id: str, frame: FrameObservation) -> SafetyAnalysis:
        return self.get(stream_id).process_frame(frame)

    def remove(self, stream_id: str) -> bool:
        """Discard a stream's analyzer. Returns False if it did not exist."""
        with self._lock:
            removed = self._analyzers.pop(stream_id, None) is not None
        if removed:
            logger.info(f"Removed analyzer for stream: {stream_id}")
        return removed

    def stream_ids(self) -> list[str]:
        with self._lock:
            return list(self._analyzers)

    def stats(self) -> dict[str, AnalyzerStats]:
        """Statistics for every registered stream."""
        with self._lock:
            analyzers = dict(self._analyzers)
        return {stream_id: a.get_stats() for stream_id, a in analyzers.items()}

    def __len__(self) -> int:
        with self._lock:
            return len(self._analyzers)

    def __contains__(self, stream_id: str) -> bool:
        with self._lock:
            return stream_id in self._analyzers
