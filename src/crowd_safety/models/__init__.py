"""
Consolidated data models for crowd safety analysis.

This package contains all core data structures used across the application.
"""

from .detection import (
    BoundingBox,
    Detection,
    DetectionKind,
    FrameObservation,
    InvalidDetectionError,
)
from .events import (
    AnalyzerStats,
    DensityCell,
    DensitySurgeEvent,
    FallingPersonEvent,
    LyingPersonEvent,
    SafetyAnalysis,
    SafetyStatus,
    Severity,
)
from .tracking import PersonTrack, TrackPosition

__all__ = [
    "AnalyzerStats",
    # Input models
    "BoundingBox",
    "Detection",
    "DetectionKind",
    # Event models
    "DensityCell",
    "DensitySurgeEvent",
    "FallingPersonEvent",
    "FrameObservation",
    "InvalidDetectionError",
    "LyingPersonEvent",
    # Tracking models
    "PersonTrack",
    "SafetyAnalysis",
    "SafetyStatus",
    "Severity",
    "TrackPosition",
]
