"""
Tests for density grid analysis and surge detection
"""

import unittest

from crowd_safety.config import AnalyzerConfig
from crowd_safety.core import DensityGridAnalyzer, SurgeDetector
from crowd_safety.models import (
    BoundingBox,
    DensityCell,
    Detection,
    DetectionKind,
    FrameObservation,
    Severity,
)


def person(left: float, top: float, right: float, bottom: float) -> Detection:
    return Detection(DetectionKind.PERSON, BoundingBox(left, top, right, bottom))


def frame(timestamp_ms: float, *detections: Detection) -> FrameObservation:
    return FrameObservation(frame_id="f", timestamp_ms=timestamp_ms, detections=detections)


def snapshot(densities: dict[int, float], timestamp_ms: float = 0) -> list[DensityCell]:
    """64-cell snapshot with the given density per cell index, 0 elsewhere."""
    cells = []
    for k in range(64):
        i, j = divmod(k, 8)
        cells.append(
            DensityCell(
                i=i, j=j, x=i / 8, y=j / 8, width=1 / 8, height=1 / 8,
                person_count=0, density=densities.get(k, 0.0), timestamp_ms=timestamp_ms,
            )
        )
    return cells


class TestDensityGridAnalyzer(unittest.TestCase):
    """Test per-frame density grid."""

    def setUp(self):
        self.analyzer = DensityGridAnalyzer()

    def test_grid_shape_and_order(self):
        """Test 64 cells in row-major (i, j) order."""
        cells = self.analyzer.analyze(frame(0))

        self.assertEqual(len(cells), 64)
        for k, cell in enumerate(cells):
            self.assertEqual((cell.i, cell.j), divmod(k, 8))
            self.assertEqual(cell.width, 0.125)
            self.assertEqual(cell.x, cell.i * 0.125)
            self.assertEqual(cell.y, cell.j * 0.125)

    def test_empty_frame_zero_density(self):
        cells = self.analyzer.analyze(frame(0))
        self.assertTrue(all(c.density == 0 and c.person_count == 0 for c in cells))

    def test_person_counted_in_center_cell(self):
        """Test person center (0.3, 0.6) lands in cell i=2, j=4."""
        cells = self.analyzer.analyze(frame(10, person(0.25, 0.5, 0.35, 0.7)))

        cell = cells[2 * 8 + 4]
        self.assertEqual(cell.person_count, 1)
        self.assertEqual(cell.density, 64.0)
        self.assertEqual(cell.timestamp_ms, 10)
        self.assertEqual(sum(c.person_count for c in cells), 1)

    def test_lower_bound_inclusive(self):
        """Test a center exactly on a cell edge belongs to the higher cell."""
        # center x = 0.125, y = 0.125
        cells = self.analyzer.analyze(frame(0, person(0.0, 0.0, 0.25, 0.25)))

        self.assertEqual(cells[1 * 8 + 1].person_count, 1)
        self.assertEqual(cells[0].person_count, 0)

    def test_multiple_persons_same_cell(self):
        cells = self.analyzer.analyze(
            frame(0, person(0.0, 0.0, 0.1, 0.1), person(0.01, 0.01, 0.09, 0.11))
        )
        self.assertEqual(cells[0].person_count, 2)
        self.assertEqual(cells[0].density, 128.0)

    def test_non_person_ignored(self):
        car = Detection(DetectionKind.OTHER, BoundingBox(0.0, 0.0, 0.1, 0.1))
        cells = self.analyzer.analyze(frame(0, car))
        self.assertEqual(sum(c.person_count for c in cells), 0)

    def test_center_outside_grid_ignored(self):
        """Test centers outside [0, 1) are not counted."""
        cells = self.analyzer.analyze(frame(0, person(0.9, 0.9, 1.3, 1.3)))
        self.assertEqual(sum(c.person_count for c in cells), 0)

    def test_analyze_does_not_touch_history(self):
        self.analyzer.analyze(frame(0))
        self.assertEqual(self.analyzer.history, [])

    def test_history_bounded(self):
        """Test history keeps only max_frame_history snapshots."""
        for t in range(45):
            self.analyzer.record(frame(t))

        history = self.analyzer.history
        self.assertEqual(len(history), 30)
        self.assertEqual(history[0][0].timestamp_ms, 15)
        self.assertEqual(history[-1][0].timestamp_ms, 44)

    def test_custom_grid_size(self):
        analyzer = DensityGridAnalyzer(AnalyzerConfig(grid_size=4))
        cells = analyzer.analyze(frame(0, person(0.0, 0.0, 0.1, 0.1)))

        self.assertEqual(len(cells), 16)
        self.assertEqual(cells[0].density, 16.0)


class TestSurgeDetector(unittest.TestCase):
    """Test surge detection between consecutive snapshots."""

    def setUp(self):
        self.detector = SurgeDetector()

    def test_requires_two_snapshots(self):
        self.assertEqual(self.detector.detect([]), [])
        self.assertEqual(self.detector.detect([snapshot({5: 1.0})]), [])

    def test_medium_surge(self):
        """Test 0.10 -> 0.20 fires MEDIUM (above 0.15 and above 0.10 * 1.5)."""
        surges = self.detector.detect([snapshot({5: 0.10}), snapshot({5: 0.20}, 100)])

        self.assertEqual(len(surges), 1)
        surge = surges[0]
        self.assertEqual(surge.severity, Severity.MEDIUM)
        self.assertEqual((surge.cell.i, surge.cell.j), (0, 5))
        self.assertAlmostEqual(surge.increase_percent, 100.0)
        self.assertEqual(surge.previous_density, 0.10)
        self.assertEqual(surge.current_density, 0.20)
        self.assertEqual(surge.timestamp_ms, 100)

    def test_high_surge(self):
        """Test density above twice the threshold is HIGH."""
        surges = self.detector.detect([snapshot({7: 0.2}), snapshot({7: 0.4})])

        self.assertEqual(len(surges), 1)
        self.assertEqual(surges[0].severity, Severity.HIGH)

    def test_zero_previous_fires_high(self):
        """Test an empty cell jumping above threshold is an automatic HIGH surge."""
        surges = self.detector.detect([snapshot({}), snapshot({3: 0.20})])

        self.assertEqual(len(surges), 1)
        self.assertEqual(surges[0].severity, Severity.HIGH)
        self.assertIsNone(surges[0].increase_percent)

    def test_zero_previous_below_threshold(self):
        surges = self.detector.detect([snapshot({}), snapshot({3: 0.14})])
        self.assertEqual(surges, [])

    def test_insufficient_relative_increase(self):
        """Test 0.20 -> 0.25 is above threshold but not a 50% jump."""
        surges = self.detector.detect([snapshot({1: 0.20}), snapshot({1: 0.25})])
        self.assertEqual(surges, [])

    def test_decrease_not_surge(self):
        surges = self.detector.detect([snapshot({1: 0.5}), snapshot({1: 0.2})])
        self.assertEqual(surges, [])

    def test_only_latest_two_compared(self):
        """Test older snapshots are ignored."""
        history = [snapshot({}), snapshot({2: 0.3}), snapshot({2: 0.3})]
        self.assertEqual(self.detector.detect(history), [])

    def test_counts_from_real_frames(self):
        """Test two -> four persons in one cell surges; two -> three does not."""
        grid = DensityGridAnalyzer()
        two = [person(0.0, 0.0, 0.1, 0.1)] * 2

        base = grid.analyze(frame(0, *two))
        three = grid.analyze(frame(1, *two, person(0.0, 0.0, 0.1, 0.1)))
        four = grid.analyze(frame(1, *two, *two))

        self.assertEqual(self.detector.detect([base, three]), [])
        surges = self.detector.detect([base, four])
        self.assertEqual(len(surges), 1)
        self.assertEqual(surges[0].severity, Severity.HIGH)
        self.assertEqual(surges[0].increase_percent, 100.0)


if __name__ == "__main__":
    unittest.main()
