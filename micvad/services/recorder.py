"""Records one utterance per call."""

import logging
from typing import Optional, TextIO

from ..audio.capture import CaptureDevice
from ..audio.level_meter import LevelMeter
from ..audio.vad import VadSession
from ..models.audio import LevelMeterConfig
from ..storage.file_manager import FileManager

logger = logging.getLogger(__name__)


class Recorder:
    """Runs a VAD session on a fresh capture stream and saves the result."""

    def __init__(
        self,
        device: CaptureDevice,
        file_manager: FileManager,
        threshold: float,
        silent_limit: int = 50,
        meter_sink: Optional[TextIO] = None,
        max_level: float = 1000.0,
        max_session_frames: Optional[int] = None,
    ):
        """Initialize recorder.

        Args:
            device: Capture device, opened once per recording
            file_manager: Where finished recordings go
            threshold: Calibrated loudness above which a frame is speech
            silent_limit: Consecutive silent frames that end a recording
            meter_sink: Text stream for the live level meter, None to disable
            max_level: Full scale of the level meter
            max_session_frames: Optional hard cap on recording length
        """
        if not threshold > 0:
            raise ValueError(f"threshold must be > 0, got {threshold}")
        self.device = device
        self.file_manager = file_manager
        self.threshold = threshold
        self.silent_limit = silent_limit
        self.meter_sink = meter_sink
        self.max_level = max_level
        self.max_session_frames = max_session_frames

    def record(self) -> str:
        """Record until the speaker goes quiet.

        Returns:
            Path of the written WAV file

        Raises:
            InitializationFailure: if the stream cannot be opened
            StreamReadFailure: if a frame read fails; nothing is saved
            PersistenceFailure: if the file cannot be written
        """
        session = VadSession(self.threshold, self.silent_limit, self.max_session_frames)
        meter = None
        if self.meter_sink is not None:
            meter = LevelMeter(
                LevelMeterConfig(max_level=self.max_level, threshold=self.threshold),
                self.meter_sink,
            )

        logger.debug("Start recording...")
        try:
            with self.device.open() as stream:
                while not session.is_terminated:
                    session.process(stream.read())
                    if meter is not None:
                        meter.show(session.last_level)
        finally:
            if meter is not None:
                meter.close()
        logger.debug("Stop recording...")

        duration = session.frame_count * self.device.frame_length / self.device.sample_rate
        logger.info(f"Recorded {session.frame_count} frames ({duration:.2f}s), "
                    f"ended by {session.termination.value}")

        logger.debug("Dumping audio to file...")
        return self.file_manager.save_recording(session.audio(), self.device.sample_rate)
