"""Unit tests for module startup."""

import logging
from unittest.mock import patch

import pytest

from micvad.errors import CalibrationError, ConfigurationError
from micvad.main import MicModule


@pytest.fixture
def restore_logging():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def module_config(config_file):
    def write(mic_section: str = "") -> str:
        return config_file(
            "mic:\n"
            "  device: USB Microphone\n"
            f"{mic_section}"
            "calibration:\n"
            "  frame_count: 10\n"
            "level_meter:\n"
            "  enabled: false\n"
            "storage:\n"
            "  tmp_dir: recordings\n"
            "logging:\n"
            "  file_path: logs/micvad.log\n"
            "  console_output: false\n"
        )

    return write


@pytest.mark.unit
class TestMicModule:

    def test_init_calibrates_and_builds_recorder(self, module_config, frame_factory,
                                                  fake_device_factory, restore_logging):
        device = fake_device_factory([frame_factory(60)] * 10)
        module = MicModule(module_config("  silent_limit: 25\n  noise_multiplier: 3.0\n"))

        with patch('micvad.main.CaptureDevice') as capture_device:
            capture_device.from_name.return_value = device
            module.init()

        capture_device.from_name.assert_called_once_with("USB Microphone", 16000, 512)
        assert module.recorder.threshold == 180.0
        assert module.recorder.silent_limit == 25
        assert module.recorder.meter_sink is None
        assert module.recorder.max_session_frames is None
        assert module.service is not None
        assert device.reads == 10

    def test_malformed_value_fails_before_calibration(self, module_config, restore_logging):
        module = MicModule(module_config("  silent_limit: soon\n"))

        with patch('micvad.main.CaptureDevice') as capture_device:
            with pytest.raises(ConfigurationError, match="mic.silent_limit"):
                module.init()

        capture_device.from_name.assert_not_called()

    def test_calibration_failure_is_fatal(self, module_config, frame_factory,
                                          fake_device_factory, restore_logging):
        module = MicModule(module_config())

        with patch('micvad.main.CaptureDevice') as capture_device:
            capture_device.from_name.return_value = fake_device_factory([frame_factory(0)] * 10)
            with pytest.raises(CalibrationError):
                module.init()

        assert module.recorder is None

    def test_malformed_log_level_is_configuration_error(self, config_file, restore_logging):
        path = config_file(
            "logging:\n"
            "  level: VERBOSE\n"
            "  file_path: logs/micvad.log\n"
            "  console_output: false\n"
        )

        with pytest.raises(ConfigurationError, match="logging.level"):
            MicModule(path)

    def test_log_level_override(self, module_config, restore_logging):
        MicModule(module_config(), log_level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_custom_library_path_warns(self, module_config, frame_factory,
                                       fake_device_factory, restore_logging):
        module = MicModule(module_config("  library_path: /opt/pv/libpv_recorder.so\n"))

        with patch('micvad.main.CaptureDevice') as capture_device, \
                patch('micvad.main.logger') as main_logger:
            capture_device.from_name.return_value = fake_device_factory([frame_factory(60)] * 10)
            module.init()

        warnings = [c.args[0] for c in main_logger.warning.call_args_list]
        assert any("mic.library_path" in w for w in warnings)

    def test_default_library_path_does_not_warn(self, module_config, frame_factory,
                                                fake_device_factory, restore_logging):
        module = MicModule(module_config())

        with patch('micvad.main.CaptureDevice') as capture_device, \
                patch('micvad.main.logger') as main_logger:
            capture_device.from_name.return_value = fake_device_factory([frame_factory(60)] * 10)
            module.init()

        main_logger.warning.assert_not_called()

    def test_logging_goes_to_configured_file_only(self, module_config, restore_logging):
        MicModule(module_config())

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.FileHandler)
        assert handlers[0].baseFilename.endswith("micvad.log")
        assert logging.getLogger().level == logging.INFO
