"""
Crowd Safety Analyzer

Real-time safety assessment over per-frame person detections from a
video-analysis pipeline. Tracks persons across frames, detects sudden
crowd-density increases on a fixed grid, and flags falling and lying
persons.

Package structure:
  models/     - Detections, tracks, events and results
  core/       - Tracker, density grid, surge detector, posture, analyzer
  processor/  - Raw payload ingest and incident records
  config/     - Configuration loading and validation
  utils/      - Constants and geometry
"""

__version__ = "1.0.0"

# Configuration
from .config import AnalyzerConfig, ConfigValidationError, load_config

# Core analysis
from .core import AnalyzerRegistry, SafetyAnalyzer

# Models
from .models import (
    BoundingBox,
    Detection,
    DetectionKind,
    FrameObservation,
    SafetyAnalysis,
    SafetyStatus,
    Severity,
)

# Processor (ingest, incidents)
from .processor import build_incidents, parse_frame

__all__ = [
    # Config
    "AnalyzerConfig",
    # Core
    "AnalyzerRegistry",
    # Models
    "BoundingBox",
    "ConfigValidationError",
    "Detection",
    "DetectionKind",
    "FrameObservation",
    "SafetyAnalysis",
    "SafetyAnalyzer",
    "SafetyStatus",
    "Severity",
    # Processor
    "build_incidents",
    "load_config",
    "parse_frame",
]
