"""Recording session state models."""

from enum import Enum


class VadState(Enum):
    """Voice activity state of a recording session."""
    ARMED = "armed"            # Buffering, no loud frame seen yet
    ACTIVE = "active"          # Speech observed, counting the silence run
    TERMINATED = "terminated"  # Final


class TerminationReason(Enum):
    """Why a recording session ended."""
    SILENCE = "silence"
    MAX_FRAMES = "max_frames"
