"""File management for finished recordings."""

import logging
import uuid
import wave
from pathlib import Path

import numpy as np

from ..errors import PersistenceFailure

logger = logging.getLogger(__name__)

SAMPLE_WIDTH_BYTES = 2  # 16-bit PCM
CHANNELS = 1


class FileManager:
    """Manages the directory where recordings are written."""

    def __init__(self, tmp_dir: str):
        """Initialize file manager.

        Args:
            tmp_dir: Directory for recording files
        """
        self.tmp_dir = Path(tmp_dir)
        self.tmp_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"FileManager initialized with tmp_dir: {self.tmp_dir}")

    def new_recording_path(self) -> Path:
        """Fresh, unique path for a recording."""
        return self.tmp_dir / f"{uuid.uuid4()}.wav"

    def save_recording(self, samples: np.ndarray, sample_rate: int = 16000) -> str:
        """Write samples as a mono 16-bit PCM WAV file.

        Args:
            samples: int16 samples in playback order
            sample_rate: Sample rate written to the header

        Returns:
            Full path to the saved file
        """
        path = self.new_recording_path()
        pcm = np.asarray(samples, dtype='<i2')

        try:
            with wave.open(str(path), 'wb') as wf:
                wf.setnchannels(CHANNELS)
                wf.setsampwidth(SAMPLE_WIDTH_BYTES)
                wf.setframerate(sample_rate)
                wf.writeframes(pcm.tobytes())
        except (OSError, wave.Error) as e:
            logger.error(f"Error saving audio file {path}: {e}")
            # A truncated file must not look like a recording
            path.unlink(missing_ok=True)
            raise PersistenceFailure(f"Failed to write recording {path}: {e}") from e

        logger.info(f"Audio file saved: {path} ({len(pcm)} samples)")
        return str(path)

    def load_recording(self, path: str) -> np.ndarray:
        """Read the samples of a mono 16-bit WAV file."""
        with wave.open(str(path), 'rb') as wf:
            if wf.getnchannels() != CHANNELS or wf.getsampwidth() != SAMPLE_WIDTH_BYTES:
                raise ValueError(f"{path} is not mono 16-bit PCM")
            data = wf.readframes(wf.getnframes())
        return np.frombuffer(data, dtype='<i2').astype(np.int16)
