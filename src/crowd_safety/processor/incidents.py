"""
Incident Builder

Converts a SafetyAnalysis into incident records for the external
persistence and alerting layer. Storage itself happens outside this
package; records carry everything needed to insert them.

Mapping:
- density surge (HIGH/MEDIUM) -> SURGE_DETECTION, confidence 0.8
- falling person             -> FALLING_PERSON (HIGH), confidence 0.9
- lying person               -> LYING_PERSON (MEDIUM), confidence 0.8
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..models import SafetyAnalysis, SafetyStatus, Severity
from ..utils.constants import (
    DEFAULT_APPLICATION_ID,
    DEFAULT_STREAM_ID,
    DEFAULT_STREAM_SOURCE,
    FALLING_INCIDENT_CONFIDENCE,
    LYING_INCIDENT_CONFIDENCE,
    SURGE_INCIDENT_CONFIDENCE,
)

logger = logging.getLogger(__name__)

INCIDENT_SURGE = "SURGE_DETECTION"
INCIDENT_FALLING = "FALLING_PERSON"
INCIDENT_LYING = "LYING_PERSON"


@dataclass
class Incident:
    """One safety incident ready for persistence."""

    incident_type: str
    severity: Severity
    confidence: float
    timestamp_ms: float
    frame_id: str
    stream_source: str = DEFAULT_STREAM_SOURCE
    application_id: str = DEFAULT_APPLICATION_ID
    stream_id: str = DEFAULT_STREAM_ID
    analysis_id: str | None = None
    detection_data: dict[str, Any] = field(default_factory=dict)
    safety_analysis: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON transport."""
        return {
            "incident_type": self.incident_type,
            "severity": self.severity.value,
            "confidence": self.confidence,
            "timestamp": datetime.fromtimestamp(
                self.timestamp_ms / 1000, tz=timezone.utc
            ).isoformat(),
            "timestamp_ms": self.timestamp_ms,
            "frame_id": self.frame_id,
            "stream_source": self.stream_source,
            "application_id": self.application_id,
            "stream_id": self.stream_id,
            "analysis_id": self.analysis_id,
            "detection_data": self.detection_data,
            "safety_analysis": self.safety_analysis,
            "acknowledged": False,
        }


def incident_severity(analysis: SafetyAnalysis) -> Severity:
    """Severity of the analysis as a whole: HIGH when CRITICAL, else MEDIUM."""
    if analysis.overall_safety_status is SafetyStatus.CRITICAL:
        return Severity.HIGH
    return Severity.MEDIUM


def build_incidents(
    analysis: SafetyAnalysis,
    stream_id: str = DEFAULT_STREAM_ID,
    application_id: str = DEFAULT_APPLICATION_ID,
    stream_source: str = DEFAULT_STREAM_SOURCE,
    analysis_id: str | None = None,
) -> list[Incident]:
    """
    Build incident records from one frame's analysis.

    Args:
        analysis: Result of SafetyAnalyzer.process_frame
        stream_id: Stream the frame came from
        application_id: Owning application
        stream_source: Camera/source label
        analysis_id: Optional id linking back to an upstream vision analysis

    Returns:
        Incident records, surges first, then falls, then lying persons.
        Empty if the analysis has no events.
    """
    if not analysis.has_incidents():
        return []

    summary = analysis.to_dict()
    common = {
        "timestamp_ms": analysis.timestamp_ms,
        "frame_id": analysis.frame_id,
        "stream_source": stream_source,
        "application_id": application_id,
        "stream_id": stream_id,
        "analysis_id": analysis_id,
        "safety_analysis": summary,
    }

    incidents = []
    for surge in analysis.density_surges:
        incidents.append(
            Incident(
                incident_type=INCIDENT_SURGE,
                severity=surge.severity,
                confidence=SURGE_INCIDENT_CONFIDENCE,
                detection_data=surge.to_dict(),
                **common,
            )
        )

    for fall in analysis.falling_persons:
        incidents.append(
            Incident(
                incident_type=INCIDENT_FALLING,
                severity=Severity.HIGH,
                confidence=FALLING_INCIDENT_CONFIDENCE,
                detection_data=fall.to_dict(),
                **common,
            )
        )

    for lying in analysis.lying_persons:
        incidents.append(
            Incident(
                incident_type=INCIDENT_LYING,
                severity=Severity.MEDIUM,
                confidence=LYING_INCIDENT_CONFIDENCE,
                detection_data=lying.to_dict(),
                **common,
            )
        )

    logger.info(
        f"Built {len(incidents)} incident(s) for frame {analysis.frame_id} "
        f"({incident_severity(analysis).value})"
    )
    return incidents
