"""
Density Grid Analyzer - person density per cell of a fixed grid.

Each frame is split into grid_size x grid_size cells over normalized
coordinates. A person counts toward the cell containing its bbox center,
using half-open bounds [x, x + w) x [y, y + h).
"""

import logging
from collections import deque

import numpy as np

from ..config.schemas import AnalyzerConfig
from ..models import DensityCell, FrameObservation
from ..utils.geometry import bbox_center

logger = logging.getLogger(__name__)


class DensityGridAnalyzer:
    """
    Computes density snapshots and keeps a bounded history of them.

    Snapshots are lists of cells in row-major (i, j) order, where i is the
    column (x) index and j the row (y) index. The same order is used by the
    surge detector to pair cells across frames.
    """

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()
        self.grid_size = self.config.grid_size
        self.cell_width = 1 / self.grid_size
        self.cell_height = 1 / self.grid_size
        self._x_edges = np.arange(self.grid_size) * self.cell_width
        self._y_edges = np.arange(self.grid_size) * self.cell_height
        self._history: deque[list[DensityCell]] = deque(maxlen=self.config.max_frame_history)

    def analyze(self, frame: FrameObservation) -> list[DensityCell]:
        """
        Compute the density snapshot for one frame.

        Pure function of the frame; history is untouched.

        Args:
            frame: Frame with validated detections

        Returns:
            grid_size**2 cells in row-major (i, j) order
        """
        counts = self._count_persons(frame)
        cell_area = self.cell_width * self.cell_height

        cells = []
        for i in range(self.grid_size):
            for j in range(self.grid_size):
                person_count = int(counts[i, j])
                cells.append(
                    DensityCell(
                        i=i,
                        j=j,
                        x=float(self._x_edges[i]),
                        y=float(self._y_edges[j]),
                        width=self.cell_width,
                        height=self.cell_height,
                        person_count=person_count,
                        density=person_count / cell_area,
                        timestamp_ms=frame.timestamp_ms,
                    )
                )
        return cells

    def _count_persons(self, frame: FrameObservation) -> np.ndarray:
        """Person counts indexed [i, j]."""
        counts = np.zeros((self.grid_size, self.grid_size), dtype=int)
        persons = frame.persons()
        if not persons:
            return counts

        centers = np.array([bbox_center(p.bbox) for p in persons], dtype=float)
        xs, ys = centers[:, 0], centers[:, 1]

        col = np.searchsorted(self._x_edges, xs, side="right") - 1
        row = np.searchsorted(self._y_edges, ys, side="right") - 1

        # Centers left of/above the grid get -1; right of/below the last
        # edge must still fall inside the last cell's extent
        inside = (col >= 0) & (row >= 0)
        inside &= xs < self._x_edges[col.clip(0)] + self.cell_width
        inside &= ys < self._y_edges[row.clip(0)] + self.cell_height

        dropped = int((~inside).sum())
        if dropped:
            logger.debug(f"{dropped} person center(s) outside the grid in frame {frame.frame_id}")

        np.add.at(counts, (col[inside], row[inside]), 1)
        return counts

    def record(self, frame: FrameObservation) -> list[DensityCell]:
        """Analyze a frame and append the snapshot to history."""
        snapshot = self.analyze(frame)
        self._history.append(snapshot)
        return snapshot

    @property
    def history(self) -> list[list[DensityCell]]:
        """Retained snapshots, oldest first."""
        return list(self._history)

    @property
    def latest(self) -> list[DensityCell] | None:
        return self._history[-1] if self._history else None

    def clear(self) -> None:
        self._history.clear()
