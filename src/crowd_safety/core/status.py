"""
Safety Status Aggregator - reduces per-frame events to one safety level.
"""

from collections.abc import Sequence

from ..models import (
    DensitySurgeEvent,
    FallingPersonEvent,
    LyingPersonEvent,
    SafetyStatus,
    Severity,
)


def aggregate(
    surges: Sequence[DensitySurgeEvent],
    falls: Sequence[FallingPersonEvent],
    lies: Sequence[LyingPersonEvent],
) -> SafetyStatus:
    """
    Overall safety status for one frame.

    CRITICAL on any HIGH surge or any fall; WARNING when more than one
    MEDIUM event (surges plus lying persons); SAFE otherwise.
    """
    if falls or any(s.severity is Severity.HIGH for s in surges):
        return SafetyStatus.CRITICAL

    medium_count = sum(1 for s in surges if s.severity is Severity.MEDIUM) + len(lies)
    if medium_count > 1:
        return SafetyStatus.WARNING

    return SafetyStatus.SAFE
