"""Audio-related data models."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CalibrationResult:
    """Outcome of ambient noise calibration."""
    threshold: float
    ambient_level: float  # Mean loudness over the calibration frames
    frame_count: int
    noise_multiplier: float


@dataclass(frozen=True)
class LevelMeterConfig:
    """Static configuration of the textual level gauge."""
    max_level: float = 1000.0
    threshold: Optional[float] = None
    width: int = 80  # Total columns including the two border glyphs

    @property
    def content_width(self) -> int:
        return self.width - 2
