"""
Unit Tests for Centralized Logging.

Tests configuration loading, handler setup and logger access.
"""

import logging
from logging.handlers import RotatingFileHandler
from unittest.mock import patch

import pytest

from modules.backend.core import logging as logging_module
from modules.backend.core.logging import _resolve_log_path, get_logger, setup_logging


@pytest.fixture
def logging_config() -> dict:
    return {
        "level": "INFO",
        "format": "json",
        "handlers": {
            "console": {"enabled": True},
            "file": {
                "enabled": False,
                "path": "logs/system.jsonl",
                "max_bytes": 1024,
                "backup_count": 2,
            },
        },
    }


@pytest.fixture(autouse=True)
def _reset_cached_config():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    logging_module._logging_config = None
    yield
    logging_module._logging_config = None
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


class TestLoggingConfigLoading:
    """Tests for logging configuration loading from YAML."""

    def test_reads_logging_yaml(self, logging_config):
        """Should load configuration through load_yaml_config."""
        with patch("modules.backend.core.logging.load_yaml_config", return_value=logging_config) as mock_load:
            config = logging_module._load_logging_config()

        mock_load.assert_called_once_with("logging.yaml")
        assert config["handlers"]["file"]["backup_count"] == 2

    def test_config_is_cached(self, logging_config):
        """Should read the file only once."""
        with patch("modules.backend.core.logging.load_yaml_config", return_value=logging_config) as mock_load:
            first = logging_module._load_logging_config()
            second = logging_module._load_logging_config()

        assert first is second
        assert mock_load.call_count == 1

    def test_real_logging_yaml_is_valid(self):
        """Should load the project's logging.yaml."""
        config = logging_module._load_logging_config()
        assert config["format"] in {"json", "console"}


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_uses_config_defaults(self, logging_config):
        """Should take level from logging.yaml when not overridden."""
        with patch("modules.backend.core.logging._load_logging_config", return_value=logging_config):
            setup_logging()

        assert logging.getLogger().level == logging.INFO

    def test_override_takes_precedence(self, logging_config):
        """Should prefer explicit arguments over config values."""
        with patch("modules.backend.core.logging._load_logging_config", return_value=logging_config):
            setup_logging(level="DEBUG", format_type="console")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert any(type(h) is logging.StreamHandler for h in root.handlers)

    def test_console_can_be_disabled(self, logging_config):
        """Should install no console handler when disabled."""
        with patch("modules.backend.core.logging._load_logging_config", return_value=logging_config):
            setup_logging(enable_console=False)

        assert not any(type(h) is logging.StreamHandler for h in logging.getLogger().handlers)

    def test_file_handler(self, tmp_path, logging_config):
        """Should add a RotatingFileHandler writing to the resolved path."""
        log_file = tmp_path / "logs" / "system.jsonl"

        with patch("modules.backend.core.logging._load_logging_config", return_value=logging_config), \
             patch("modules.backend.core.logging._resolve_log_path", return_value=log_file):
            setup_logging(enable_file_logging=True)

        handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
        assert len(handlers) == 1
        assert handlers[0].maxBytes == 1024
        assert log_file.parent.is_dir()

        for handler in handlers:
            logging.getLogger().removeHandler(handler)
            handler.close()

    def test_repeated_setup_does_not_duplicate_handlers(self, logging_config):
        """Should replace handlers on every call."""
        with patch("modules.backend.core.logging._load_logging_config", return_value=logging_config):
            setup_logging()
            setup_logging()

        assert len(logging.getLogger().handlers) == 1


class TestHelpers:
    """Tests for get_logger and _resolve_log_path."""

    def test_get_logger_returns_structlog_logger(self):
        logger = get_logger("tests.logging")
        assert hasattr(logger, "bind")
        assert hasattr(logger, "info")

    def test_resolve_log_path_relative_to_project_root(self, tmp_path):
        with patch("modules.backend.core.logging.find_project_root", return_value=tmp_path):
            assert _resolve_log_path("logs/system.jsonl") == tmp_path / "logs" / "system.jsonl"
