"""Services layer for micvad."""

from .recorder import Recorder
from .mic_service import MicService
from .publisher import EventPublisher

__all__ = [
    "Recorder",
    "MicService",
    "EventPublisher",
]
