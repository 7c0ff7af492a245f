"""Audio capture and voice activity detection."""

from .capture import CaptureDevice, CaptureStream
from .calibrator import Calibrator
from .devices import list_input_devices, resolve_device_index
from .level_meter import LevelMeter, render_level
from .loudness import frame_loudness
from .vad import VadSession

__all__ = [
    'CaptureDevice',
    'CaptureStream',
    'Calibrator',
    'list_input_devices',
    'resolve_device_index',
    'LevelMeter',
    'render_level',
    'frame_loudness',
    'VadSession',
]
