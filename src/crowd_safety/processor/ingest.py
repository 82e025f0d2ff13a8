"""
Detection Ingest

Turns raw frame payloads from the vision-inference service into validated
FrameObservations. The upstream service reports persons in several shapes:
- kind: "PERSON"
- type: "PERSON_DETECTION"
- label: "Person"

An explicit 'kind' is authoritative: kind "OTHER" with label "Person" is
not a person. Otherwise 'type' is checked, then 'label'.

Detections without a usable bounding box are dropped here, with a warning,
so the analyzer only ever sees well-formed boxes. Frames with a missing or
non-finite timestamp are rejected.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any

from ..models import (
    BoundingBox,
    Detection,
    DetectionKind,
    FrameObservation,
    InvalidDetectionError,
)

logger = logging.getLogger(__name__)

PERSON_TYPES = {"PERSON", "PERSON_DETECTION"}
PERSON_LABEL = "person"


class InvalidFrameError(ValueError):
    """Raised when a raw frame payload cannot be turned into an observation."""


def _detection_kind(raw: Mapping[str, Any]) -> DetectionKind:
    kind = raw.get("kind")
    if isinstance(kind, str):
        return DetectionKind.PERSON if kind.upper() in PERSON_TYPES else DetectionKind.OTHER

    value = raw.get("type")
    if isinstance(value, str) and value.upper() in PERSON_TYPES:
        return DetectionKind.PERSON

    label = raw.get("label")
    if isinstance(label, str) and label.lower() == PERSON_LABEL:
        return DetectionKind.PERSON

    return DetectionKind.OTHER


def parse_detection(raw: Mapping[str, Any]) -> Detection | None:
    """
    Parse one raw detection.

    Args:
        raw: Detection dict with a 'bbox' mapping (left, top, right, bottom)

    Returns:
        Detection, or None if the bbox is missing or degenerate
    """
    bbox = raw.get("bbox")
    if not isinstance(bbox, Mapping):
        logger.warning(f"Dropping detection without bbox: {raw.get('label', raw.get('type'))}")
        return None

    try:
        box = BoundingBox(
            left=float(bbox["left"]),
            top=float(bbox["top"]),
            right=float(bbox["right"]),
            bottom=float(bbox["bottom"]),
        )
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        # InvalidDetectionError is a ValueError; OverflowError from huge JSON ints
        logger.warning(f"Dropping detection with invalid bbox: {e}")
        return None

    confidence = raw.get("confidence")
    return Detection(
        kind=_detection_kind(raw),
        bbox=box,
        label=raw.get("label"),
        confidence=float(confidence) if isinstance(confidence, (int, float)) else None,
    )


def parse_detections(raw_detections: list[Mapping[str, Any]]) -> list[Detection]:
    """Parse a list of raw detections, skipping invalid ones."""
    detections = []
    for raw in raw_detections:
        if not isinstance(raw, Mapping):
            logger.warning(f"Dropping non-mapping detection: {raw!r}")
            continue
        detection = parse_detection(raw)
        if detection is not None:
            detections.append(detection)
    return detections


def parse_frame(raw: Mapping[str, Any]) -> FrameObservation:
    """
    Parse one raw frame payload.

    Accepts 'frame_id' or 'frameId', and 'timestamp_ms' or 'timestamp'
    (milliseconds).

    Args:
        raw: Frame dict with identifier, timestamp and 'detections' list

    Returns:
        FrameObservation with only valid detections

    Raises:
        InvalidFrameError: If the timestamp is missing or non-finite, or
            detections is not a list
    """
    if not isinstance(raw, Mapping):
        raise InvalidFrameError(f"Frame must be a mapping, got {type(raw).__name__}")

    timestamp = raw.get("timestamp_ms", raw.get("timestamp"))
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        raise InvalidFrameError(f"Frame has no numeric timestamp: {timestamp!r}")

    try:
        timestamp = float(timestamp)
    except OverflowError:
        raise InvalidFrameError("Frame timestamp is out of range") from None
    if not math.isfinite(timestamp):
        raise InvalidFrameError(f"Frame timestamp is not finite: {timestamp!r}")

    raw_detections = raw.get("detections", [])
    if not isinstance(raw_detections, list):
        raise InvalidFrameError("Frame 'detections' must be a list")

    frame_id = raw.get("frame_id", raw.get("frameId"))
    if frame_id is None:
        frame_id = f"frame_{int(timestamp)}"

    return FrameObservation(
        frame_id=str(frame_id),
        timestamp_ms=timestamp,
        detections=tuple(parse_detections(raw_detections)),
    )


# Re-exported so callers can catch both from one place
__all__ = [
    "InvalidDetectionError",
    "InvalidFrameError",
    "parse_detection",
    "parse_detections",
    "parse_frame",
]
