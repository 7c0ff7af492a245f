"""Main application entry point for micvad."""

import sys
import argparse
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console

from micvad import __version__
from micvad.audio.calibrator import Calibrator
from micvad.audio.capture import CaptureDevice
from micvad.errors import MicError
from micvad.services.mic_service import MicService
from micvad.services.recorder import Recorder
from micvad.storage.file_manager import FileManager

from .config import DEFAULTS, MicConfig

logger = logging.getLogger(__name__)

console = Console()


class MicModule:

    def __init__(self, config_path: Optional[str], log_level: Optional[str] = None):
        self.config = MicConfig(config_path)
        setup_logging(self.config, log_level)
        self.service: Optional[MicService] = None
        self.recorder: Optional[Recorder] = None

    def init(self) -> None:
        """Resolve the device, calibrate and build the recorder.

        Any failure here is fatal: without a threshold nothing can be recorded.
        """
        logger.info("Initializing mic module...")

        device_name = self.config.get_str('mic.device')
        library_path = self.config.get_str('mic.library_path')
        silent_limit = self.config.get_int('mic.silent_limit', minimum=1)
        noise_multiplier = self.config.get_float('mic.noise_multiplier', positive=True)
        max_session_frames = self.config.get_optional_int('mic.max_session_frames', minimum=1)
        sample_rate = self.config.get_int('audio.sample_rate', minimum=1)
        frame_length = self.config.get_int('audio.frame_length', minimum=1)
        calibration_frames = self.config.get_int('calibration.frame_count', minimum=1)
        meter_enabled = self.config.get_bool('level_meter.enabled')
        max_level = self.config.get_float('level_meter.max_level', positive=True)

        logger.info(f"Audio settings: {sample_rate}Hz, {frame_length} samples/frame")
        if library_path != DEFAULTS['mic']['library_path']:
            logger.warning(f"mic.library_path '{library_path}' is ignored, "
                           f"PyAudio loads PortAudio itself")
        logger.info(f"Silent limit: {silent_limit} frames, noise multiplier: {noise_multiplier}")

        meter_sink = sys.stdout if meter_enabled else None
        device = CaptureDevice.from_name(device_name, sample_rate, frame_length)

        console.print("🤫 Calibrating, stay quiet...", style="blue")
        calibration = Calibrator(
            frame_count=calibration_frames,
            noise_multiplier=noise_multiplier,
            meter_sink=meter_sink,
            max_level=max_level,
        ).calibrate(device)
        logger.debug(f"Threshold: {calibration.threshold}")
        console.print(f"✅ Threshold: {calibration.threshold:.1f}", style="green")

        self.recorder = Recorder(
            device=device,
            file_manager=FileManager(self.config.get_tmp_dir()),
            threshold=calibration.threshold,
            silent_limit=silent_limit,
            meter_sink=meter_sink,
            max_level=max_level,
            max_session_frames=max_session_frames,
        )
        self.service = MicService(self.recorder)

    def run(self) -> None:
        self.service.start()
        console.print("🎙️  Waiting for triggers...", style="bold blue")
        try:
            self.service.run()
        finally:
            self.cleanup()

    def record_once(self) -> str:
        return self.recorder.record()

    def cleanup(self) -> None:
        if self.service:
            self.service.stop()


LOG_FORMATS = {
    "file": '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
    "console": '%(asctime)s - %(levelname)s - %(message)s',
}


def _make_handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def setup_logging(config: MicConfig, level: Optional[str] = None) -> None:
    """Route micvad logs to the configured file and, for warnings, to stdout.

    ``level`` overrides ``logging.level`` from the config. Malformed values
    raise ConfigurationError before any handler is replaced.
    """
    level_name = level.upper() if level else config.get_log_level('logging.level')
    log_file = Path(config.get_str('logging.file_path'))
    to_console = config.get_bool('logging.console_output')

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handlers = [_make_handler(logging.FileHandler(log_file), logging.DEBUG, LOG_FORMATS["file"])]
    if to_console:
        # Only warnings, the level meter owns stdout
        handlers.append(_make_handler(logging.StreamHandler(sys.stdout), logging.WARNING,
                                      LOG_FORMATS["console"]))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level_name)
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info(f"micvad v{__version__} logging at {level_name} to {log_file}")


def list_devices() -> None:
    for index, name in enumerate(CaptureDevice.available_devices()):
        console.print(f"{index}: {name}")


def main() -> None:
    """Main entry point for micvad."""
    parser = argparse.ArgumentParser(
        description="micvad - record one utterance per trigger using energy-based VAD"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: built-in defaults)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (overrides config)"
    )

    parser.add_argument(
        "--list-devices",
        action="store_true",
        help="Print the available input devices and exit"
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Calibrate, record a single utterance, print its path and exit"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"micvad v{__version__}"
    )

    args = parser.parse_args()

    try:
        if args.list_devices:
            list_devices()
            return

        module = MicModule(args.config, args.log_level)
        module.init()
        if args.once:
            print(module.record_once())
        else:
            module.run()
    except KeyboardInterrupt:
        console.print("\n👋 Goodbye!")
    except MicError as e:
        console.print(f"❌ Error: {e}", style="red")
        logging.error(f"Application error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
