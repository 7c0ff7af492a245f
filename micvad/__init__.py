"""micvad - energy-based microphone recorder with voice activity detection."""

__version__ = "0.1.0"
