"""Input device enumeration and selection."""

import logging
from typing import List, Sequence

import pyaudio

logger = logging.getLogger(__name__)


def list_input_devices(pa: pyaudio.PyAudio) -> List[str]:
    """Names of all devices that can capture audio, in host enumeration order."""
    names = []
    for host_index in range(pa.get_device_count()):
        info = pa.get_device_info_by_index(host_index)
        if info.get("maxInputChannels", 0) > 0:
            names.append(info["name"])
    return names


def input_host_index(pa: pyaudio.PyAudio, device_index: int) -> int:
    """Map a position in ``list_input_devices`` to the PyAudio host index."""
    position = 0
    for host_index in range(pa.get_device_count()):
        info = pa.get_device_info_by_index(host_index)
        if info.get("maxInputChannels", 0) > 0:
            if position == device_index:
                return host_index
            position += 1
    raise IndexError(f"No input device at index {device_index}")


def resolve_device_index(name: str, device_names: Sequence[str]) -> int:
    """Index of the device called ``name``.

    Unknown names fall back to the first enumerated device (index 0).
    """
    logger.debug(f"Devices: {list(device_names)}")
    for index, device_name in enumerate(device_names):
        if device_name == name:
            return index
    logger.debug(f"Device '{name}' not found, using device 0")
    return 0
