"""
Core analysis components: tracking, density, surges, posture, aggregation.
"""

from .analyzer import SafetyAnalyzer
from .density import DensityGridAnalyzer
from .history import FrameHistory
from .posture import MotionClassifier
from .registry import AnalyzerRegistry
from .status import aggregate
from .surge import SurgeDetector
from .tracker import PersonTracker

__all__ = [
    "AnalyzerRegistry",
    "DensityGridAnalyzer",
    "FrameHistory",
    "MotionClassifier",
    "PersonTracker",
    "SafetyAnalyzer",
    "SurgeDetector",
    "aggregate",
]
