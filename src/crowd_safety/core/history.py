"""
Frame History Buffer - bounded FIFO of recent frame observations.
"""

from collections import deque
from collections.abc import Iterator

from ..models import FrameObservation
from ..utils.constants import MAX_FRAME_HISTORY


class FrameHistory:
    """Keeps the most recent frames, evicting the oldest once full."""

    def __init__(self, max_frames: int = MAX_FRAME_HISTORY):
        self.max_frames = max_frames
        self._frames: deque[FrameObservation] = deque(maxlen=max_frames)

    def append(self, frame: FrameObservation) -> None:
        self._frames.append(frame)

    @property
    def latest(self) -> FrameObservation | None:
        return self._frames[-1] if self._frames else None

    def clear(self) -> None:
        self._frames.clear()

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[FrameObservation]:
        return iter(self._frames)
