"""Simple YAML configuration loader for micvad."""

import os
import tempfile
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


DEFAULTS: Dict[str, Any] = {
    "mic": {
        "device": "default",
        "library_path": "./libpv_recorder.so",
        "silent_limit": 50,
        "noise_multiplier": 2.0,
        "max_session_frames": None,
    },
    "audio": {
        "sample_rate": 16000,
        "frame_length": 512,
    },
    "calibration": {
        "frame_count": 100,
    },
    "level_meter": {
        "enabled": True,
        "max_level": 1000.0,
    },
    "storage": {
        "tmp_dir": tempfile.gettempdir(),
    },
    "logging": {
        "level": "INFO",
        "file_path": "logs/micvad.log",
        "console_output": True,
    },
}

_MISSING = object()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class MicConfig:
    """micvad configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, built-in defaults
                        are used for every key.
        """
        self.config_file = Path(config_path) if config_path else None
        self.config: Dict[str, Any] = {}

        if self.config_file is not None:
            if not self.config_file.exists():
                raise ConfigurationError(f"Configuration file not found: {self.config_file}")
            logger.info(f"Loading configuration from: {self.config_file}")
            self.config = self._load_config()
        else:
            logger.info("No configuration file given, using defaults")

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        if not config:
            raise ConfigurationError("Configuration file is empty")
        if not isinstance(config, dict):
            raise ConfigurationError("Configuration root must be a mapping")

        self._resolve_paths(config)
        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        for section, key in (("storage", "tmp_dir"), ("logging", "file_path")):
            section_config = config.get(section)
            if not isinstance(section_config, dict):
                continue
            value = section_config.get(key)
            if isinstance(value, str) and not os.path.isabs(value):
                section_config[key] = str(config_dir / value)

    @staticmethod
    def _lookup(tree: Dict[str, Any], key_path: str) -> Any:
        value: Any = tree
        for key in key_path.split('.'):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return _MISSING
        return value

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'mic.silent_limit').

        Falls back to the built-in default for the key, then to ``default``.
        """
        value = self._lookup(self.config, key_path)
        if value is _MISSING:
            value = self._lookup(DEFAULTS, key_path)
        if value is _MISSING:
            return default
        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation."""
        keys = key_path.split('.')
        config_dict = self.config

        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def get_str(self, key_path: str) -> str:
        value = self.get(key_path)
        if not isinstance(value, str) or not value:
            raise ConfigurationError(f"'{key_path}' must be a non-empty string, got {value!r}")
        return value

    def get_int(self, key_path: str, minimum: Optional[int] = None) -> int:
        """Get an integer value - CRASHES on malformed or out-of-range values."""
        value = self.get(key_path)
        # YAML booleans are ints in Python, reject them explicitly
        if isinstance(value, bool):
            raise ConfigurationError(f"'{key_path}' must be an integer, got {value!r}")
        try:
            result = int(value) if isinstance(value, str) else value
        except ValueError as e:
            raise ConfigurationError(f"'{key_path}' must be an integer, got {value!r}") from e
        if not isinstance(result, int):
            raise ConfigurationError(f"'{key_path}' must be an integer, got {value!r}")
        if minimum is not None and result < minimum:
            raise ConfigurationError(f"'{key_path}' must be >= {minimum}, got {result}")
        return result

    def get_optional_int(self, key_path: str, minimum: Optional[int] = None) -> Optional[int]:
        if self.get(key_path) is None:
            return None
        return self.get_int(key_path, minimum=minimum)

    def get_float(self, key_path: str, positive: bool = False) -> float:
        """Get a float value - CRASHES on malformed values."""
        value = self.get(key_path)
        if isinstance(value, bool) or value is None:
            raise ConfigurationError(f"'{key_path}' must be a number, got {value!r}")
        try:
            result = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"'{key_path}' must be a number, got {value!r}") from e
        if positive and not result > 0:
            raise ConfigurationError(f"'{key_path}' must be > 0, got {result}")
        return result

    def get_bool(self, key_path: str) -> bool:
        value = self.get(key_path)
        if not isinstance(value, bool):
            raise ConfigurationError(f"'{key_path}' must be true or false, got {value!r}")
        return value

    def get_tmp_dir(self) -> str:
        """Get directory for finished recordings."""
        return str(Path(self.get_str('storage.tmp_dir')).absolute())

    def get_log_level(self, key_path: str) -> str:
        """Get a logging level name such as 'INFO' - CRASHES on unknown names."""
        value = self.get(key_path)
        if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
            raise ConfigurationError(
                f"'{key_path}' must be one of {', '.join(LOG_LEVELS)}, got {value!r}"
            )
        return value.upper()
