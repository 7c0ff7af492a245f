"""Ambient noise calibration."""

import logging
from typing import Optional, TextIO

from ..errors import CalibrationError
from ..models.audio import CalibrationResult, LevelMeterConfig
from .capture import CaptureDevice
from .level_meter import LevelMeter
from .loudness import frame_loudness

logger = logging.getLogger(__name__)


class Calibrator:
    """Derives the speech threshold from the ambient noise level.

    The threshold is the mean loudness of ``frame_count`` consecutive frames
    multiplied by ``noise_multiplier``.
    """

    def __init__(
        self,
        frame_count: int = 100,
        noise_multiplier: float = 2.0,
        meter_sink: Optional[TextIO] = None,
        max_level: float = 1000.0,
    ):
        if frame_count < 1:
            raise ValueError(f"frame_count must be >= 1, got {frame_count}")
        self.frame_count = frame_count
        self.noise_multiplier = noise_multiplier
        self.meter_sink = meter_sink
        self.max_level = max_level

    def calibrate(self, device: CaptureDevice) -> CalibrationResult:
        """Sample ambient noise on ``device`` and compute the threshold.

        Raises:
            InitializationFailure: if the stream cannot be opened
            StreamReadFailure: if a frame read fails
            CalibrationError: if the resulting threshold is not positive
        """
        logger.info(f"Calibrating noise level over {self.frame_count} frames...")
        meter = None
        if self.meter_sink is not None:
            # No threshold marker, it is what we are measuring
            meter = LevelMeter(LevelMeterConfig(max_level=self.max_level), self.meter_sink)

        total = 0.0
        try:
            with device.open() as stream:
                for _ in range(self.frame_count):
                    level = frame_loudness(stream.read())
                    total += level
                    if meter is not None:
                        meter.show(level)
        finally:
            if meter is not None:
                meter.close()

        ambient_level = total / self.frame_count
        threshold = ambient_level * self.noise_multiplier
        if not threshold > 0:
            raise CalibrationError(
                f"Calibration produced threshold {threshold} "
                f"(ambient level {ambient_level}), is the microphone muted?"
            )

        logger.info(f"Ambient level: {ambient_level:.1f}, threshold: {threshold:.1f}")
        return CalibrationResult(
            threshold=threshold,
            ambient_level=ambient_level,
            frame_count=self.frame_count,
            noise_multiplier=self.noise_multiplier,
        )
