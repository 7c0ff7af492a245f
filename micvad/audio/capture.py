"""Microphone capture with scoped stream acquisition."""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

import numpy as np
import pyaudio

from ..errors import InitializationFailure, StreamReadFailure
from .devices import input_host_index, list_input_devices, resolve_device_index

logger = logging.getLogger(__name__)


class CaptureStream:
    """An open, started input stream delivering fixed-size frames."""

    def __init__(self, stream: "pyaudio.Stream", frame_length: int):
        self._stream = stream
        self.frame_length = frame_length
        self.frames_read = 0

    def read(self) -> np.ndarray:
        """Block until the next frame is available and return its samples."""
        try:
            data = self._stream.read(self.frame_length, exception_on_overflow=False)
        except OSError as e:
            logger.error(f"Error reading audio frame {self.frames_read}: {e}")
            raise StreamReadFailure(f"Failed to read audio frame: {e}") from e
        self.frames_read += 1
        return np.frombuffer(data, dtype=np.int16)


class CaptureDevice:
    """Capability to open capture streams on one input device.

    The device is only held while a stream from ``open()`` is in use.
    """

    def __init__(
        self,
        device_index: int,
        sample_rate: int = 16000,
        frame_length: int = 512,
        pyaudio_factory: Callable[[], pyaudio.PyAudio] = pyaudio.PyAudio,
    ):
        """Initialize capture device.

        Args:
            device_index: Position of the device in the input device list
            sample_rate: Audio sample rate in Hz
            frame_length: Samples per frame returned by ``CaptureStream.read``
            pyaudio_factory: Creates the PyAudio instance for each stream
        """
        self.device_index = device_index
        self.sample_rate = sample_rate
        self.frame_length = frame_length
        self._pyaudio_factory = pyaudio_factory

    @classmethod
    def from_name(
        cls,
        device_name: str,
        sample_rate: int = 16000,
        frame_length: int = 512,
        pyaudio_factory: Callable[[], pyaudio.PyAudio] = pyaudio.PyAudio,
    ) -> "CaptureDevice":
        """Create a capture device for the input device called ``device_name``."""
        devices = cls.available_devices(pyaudio_factory)
        device_index = resolve_device_index(device_name, devices)
        if devices:
            logger.info(f"Using input device {device_index}: {devices[device_index]}")
        return cls(device_index, sample_rate, frame_length, pyaudio_factory)

    @staticmethod
    def available_devices(
        pyaudio_factory: Callable[[], pyaudio.PyAudio] = pyaudio.PyAudio,
    ) -> List[str]:
        try:
            pa = pyaudio_factory()
        except Exception as e:
            raise InitializationFailure(f"Failed to initialize audio backend: {e}") from e
        try:
            return list_input_devices(pa)
        finally:
            pa.terminate()

    @contextmanager
    def open(self) -> Iterator[CaptureStream]:
        """Open and start a stream, yielding it; always released on exit."""
        pa: Optional[pyaudio.PyAudio] = None
        stream = None
        try:
            try:
                pa = self._pyaudio_factory()
                stream = pa.open(
                    format=pyaudio.paInt16,
                    channels=1,
                    rate=self.sample_rate,
                    input=True,
                    input_device_index=input_host_index(pa, self.device_index),
                    frames_per_buffer=self.frame_length,
                )
                stream.start_stream()
            except Exception as e:
                logger.error(f"Error opening audio stream on device {self.device_index}: {e}")
                raise InitializationFailure(f"Failed to open audio stream: {e}") from e

            logger.debug(f"Audio stream opened: {self.sample_rate}Hz, "
                         f"{self.frame_length} samples/frame")
            yield CaptureStream(stream, self.frame_length)
        finally:
            try:
                if stream is not None:
                    try:
                        stream.stop_stream()
                    finally:
                        stream.close()
            finally:
                if pa is not None:
                    pa.terminate()
                logger.debug("Audio stream released")
