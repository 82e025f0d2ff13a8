"""
Surge Detector - flags abnormal density increases between consecutive snapshots.
"""

import logging
from collections.abc import Sequence

from ..config.schemas import AnalyzerConfig
from ..models import DensityCell, DensitySurgeEvent, Severity

logger = logging.getLogger(__name__)


class SurgeDetector:
    """
    Compares the two most recent density snapshots cell by cell.

    A cell surges when its density exceeds density_threshold and grew by
    more than surge_threshold relative to the previous frame. A cell that
    was empty and is now above density_threshold always surges at HIGH
    severity, with no increase percentage.
    """

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()

    def detect(self, history: Sequence[Sequence[DensityCell]]) -> list[DensitySurgeEvent]:
        """
        Detect surges between history[-2] and history[-1].

        Args:
            history: Density snapshots, oldest first, all in the same cell order

        Returns:
            Surge events in cell order (empty with fewer than two snapshots)
        """
        if len(history) < 2:
            return []

        current_snapshot = history[-1]
        previous_snapshot = history[-2]
        surges = []

        for current, previous in zip(current_snapshot, previous_snapshot):
            event = self._check_cell(current, previous)
            if event:
                surges.append(event)

        if surges:
            logger.debug(f"{len(surges)} density surge(s) detected")
        return surges

    def _check_cell(
        self, current: DensityCell, previous: DensityCell
    ) -> DensitySurgeEvent | None:
        threshold = self.config.density_threshold

        if current.density <= threshold:
            return None

        if previous.density == 0:
            return DensitySurgeEvent(
                cell=current,
                current_density=current.density,
                previous_density=previous.density,
                increase_percent=None,
                severity=Severity.HIGH,
                timestamp_ms=current.timestamp_ms,
            )

        if current.density <= previous.density * (1 + self.config.surge_threshold):
            return None

        increase = (current.density - previous.density) / previous.density * 100
        severity = Severity.HIGH if current.density > threshold * 2 else Severity.MEDIUM

        return DensitySurgeEvent(
            cell=current,
            current_density=current.density,
            previous_density=previous.density,
            increase_percent=round(increase, 1),
            severity=severity,
            timestamp_ms=current.timestamp_ms,
        )
