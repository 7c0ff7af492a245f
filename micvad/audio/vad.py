"""Energy-based voice activity detection state machine."""

import logging
from typing import List, Optional

import numpy as np

from ..errors import SessionClosedError
from ..models.session import TerminationReason, VadState
from .loudness import frame_loudness

logger = logging.getLogger(__name__)


class VadSession:
    """One recording session driven by per-frame loudness.

    Starts ``ARMED`` and buffers every frame. The first frame louder than the
    threshold makes it ``ACTIVE``; from then on ``silent_limit`` consecutive
    non-loud frames make it ``TERMINATED``. Silent frames in ``ARMED`` never
    count, so a session started in a quiet room waits for sound unless
    ``max_frames`` caps its length.
    """

    def __init__(self, threshold: float, silent_limit: int, max_frames: Optional[int] = None):
        if silent_limit < 1:
            raise ValueError(f"silent_limit must be >= 1, got {silent_limit}")
        if max_frames is not None and max_frames < 1:
            raise ValueError(f"max_frames must be >= 1, got {max_frames}")
        self.threshold = threshold
        self.silent_limit = silent_limit
        self.max_frames = max_frames

        self.state = VadState.ARMED
        self.silence_run = 0
        self.termination: Optional[TerminationReason] = None
        self.last_level = 0.0
        self._frames: List[np.ndarray] = []

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def is_terminated(self) -> bool:
        return self.state is VadState.TERMINATED

    def process(self, frame: np.ndarray) -> VadState:
        """Append ``frame`` to the buffer and advance the state machine."""
        if self.is_terminated:
            raise SessionClosedError("Session already terminated")

        self._frames.append(frame)
        self.last_level = frame_loudness(frame)
        loud = self.last_level > self.threshold

        if loud:
            if self.state is VadState.ARMED:
                logger.debug(f"Speech started at frame {self.frame_count}")
            self.state = VadState.ACTIVE
            self.silence_run = 0
        elif self.state is VadState.ACTIVE:
            self.silence_run += 1
            if self.silence_run >= self.silent_limit:
                self._terminate(TerminationReason.SILENCE)

        if not self.is_terminated and self.max_frames is not None and self.frame_count >= self.max_frames:
            self._terminate(TerminationReason.MAX_FRAMES)

        return self.state

    def _terminate(self, reason: TerminationReason) -> None:
        self.state = VadState.TERMINATED
        self.termination = reason
        logger.debug(f"Session terminated ({reason.value}) after {self.frame_count} frames")

    def audio(self) -> np.ndarray:
        """All buffered samples in arrival order."""
        if not self._frames:
            return np.zeros(0, dtype=np.int16)
        return np.concatenate(self._frames).astype(np.int16, copy=False)
