"""Exception types raised by micvad."""


class MicError(Exception):
    """Base class for all micvad errors."""


class ConfigurationError(MicError):
    """Configuration file or value is malformed."""


class InitializationFailure(MicError):
    """Capture device or backend cannot be opened or started."""


class CalibrationError(InitializationFailure):
    """Ambient noise calibration produced an unusable threshold."""


class StreamReadFailure(MicError):
    """Reading a frame from an open capture stream failed."""


class PersistenceFailure(MicError):
    """Writing a recording to disk failed."""


class SessionClosedError(MicError):
    """A frame was fed to a VAD session that already terminated."""


class MessageError(MicError):
    """A transport message cannot be answered."""
