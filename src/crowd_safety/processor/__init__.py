"""
Processor package - the seams to the external collaborators.

Inbound:  raw detection payloads -> FrameObservation (ingest)
Outbound: SafetyAnalysis -> incident records (incidents)
"""

from .incidents import (
    INCIDENT_FALLING,
    INCIDENT_LYING,
    INCIDENT_SURGE,
    Incident,
    build_incidents,
    incident_severity,
)
from .ingest import (
    InvalidFrameError,
    parse_detection,
    parse_detections,
    parse_frame,
)

__all__ = [
    "INCIDENT_FALLING",
    "INCIDENT_LYING",
    "INCIDENT_SURGE",
    # Incidents
    "Incident",
    # Ingest
    "InvalidFrameError",
    "build_incidents",
    "incident_severity",
    "parse_detection",
    "parse_detections",
    "parse_frame",
]
