"""Pytest configuration and fixtures for micvad tests."""

import pytest
import tempfile
import logging
from contextlib import contextmanager
from typing import List, Optional
from unittest.mock import Mock

import numpy as np
from pubsub import pub

from micvad.errors import StreamReadFailure


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

FRAME_LENGTH = 512
SAMPLE_RATE = 16000


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without I/O beyond temp files")
    config.addinivalue_line("markers", "integration: tests wiring several components together")
    config.addinivalue_line("markers", "hardware: tests that need a real microphone")


def make_frame(level: int, length: int = FRAME_LENGTH) -> np.ndarray:
    """Frame whose mean absolute sample value is exactly ``level``."""
    samples = np.full(length, level, dtype=np.int16)
    samples[1::2] *= -1
    return samples


class FakeCaptureStream:
    """Stream that replays scripted frames."""

    def __init__(self, device: "FakeCaptureDevice"):
        self.device = device

    def read(self) -> np.ndarray:
        device = self.device
        if device.fail_at is not None and device.reads == device.fail_at:
            raise StreamReadFailure("scripted read failure")
        if device.reads >= len(device.frames):
            raise StreamReadFailure("no more scripted frames")
        frame = device.frames[device.reads]
        device.reads += 1
        return frame


class FakeCaptureDevice:
    """Stands in for CaptureDevice, tracking how often it is opened and released."""

    def __init__(self, frames: List[np.ndarray], fail_at: Optional[int] = None,
                 frame_length: int = FRAME_LENGTH, sample_rate: int = SAMPLE_RATE):
        self.frames = list(frames)
        self.fail_at = fail_at
        self.frame_length = frame_length
        self.sample_rate = sample_rate
        self.reads = 0
        self.open_count = 0
        self.release_count = 0

    @property
    def is_open(self) -> bool:
        return self.open_count > self.release_count

    @contextmanager
    def open(self):
        assert not self.is_open, "device opened twice"
        self.open_count += 1
        try:
            yield FakeCaptureStream(self)
        finally:
            self.release_count += 1


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def frame_factory():
    return make_frame


@pytest.fixture
def fake_device_factory():
    return FakeCaptureDevice


@pytest.fixture
def mock_pyaudio():
    """Mock PyAudio for testing without actual audio hardware.

    Host device 0 is output-only, host device 1 is the only input device.
    """
    mock_pyaudio_class = Mock()
    mock_pyaudio_instance = Mock()
    mock_stream = Mock()

    mock_stream.read.return_value = make_frame(100).tobytes()
    mock_stream.start_stream.return_value = None
    mock_stream.stop_stream.return_value = None
    mock_stream.close.return_value = None

    devices = [
        {"name": "HDMI Output", "maxInputChannels": 0},
        {"name": "USB Microphone", "maxInputChannels": 1},
    ]
    mock_pyaudio_instance.get_device_count.return_value = len(devices)
    mock_pyaudio_instance.get_device_info_by_index.side_effect = lambda i: devices[i]
    mock_pyaudio_instance.open.return_value = mock_stream
    mock_pyaudio_instance.terminate.return_value = None

    mock_pyaudio_class.return_value = mock_pyaudio_instance

    yield {
        'class': mock_pyaudio_class,
        'instance': mock_pyaudio_instance,
        'stream': mock_stream
    }


@pytest.fixture
def clean_pubsub():
    """Drop all pub/sub listeners after the test."""
    yield
    pub.unsubAll()


@pytest.fixture
def config_file(temp_data_dir):
    """Write a YAML config file and return its path."""
    def write(content: str) -> str:
        path = f"{temp_data_dir}/micvad.yaml"
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    return write
