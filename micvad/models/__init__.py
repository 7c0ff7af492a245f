"""Data models for the micvad application."""

from .audio import CalibrationResult, LevelMeterConfig
from .session import VadState, TerminationReason
from .events import Message, MessageType

__all__ = [
    "CalibrationResult",
    "LevelMeterConfig",
    "VadState",
    "TerminationReason",
    "Message",
    "MessageType",
]
