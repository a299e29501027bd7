"""
Unit Tests for Centralized Logging.

Tests the logging configuration, handlers, and source handling.
"""

import logging
from logging.handlers import RotatingFileHandler
from unittest.mock import MagicMock, patch

import pytest

from canvas_shell.core import logging as logging_module
from canvas_shell.core.logging import VALID_SOURCES, get_logger, log_with_source, setup_logging


class TestValidSources:
    """Tests for VALID_SOURCES constant."""

    def test_valid_sources_contains_expected_values(self):
        assert VALID_SOURCES == frozenset({"shell", "client", "config"})

    def test_valid_sources_is_frozenset(self):
        assert isinstance(VALID_SOURCES, frozenset)


class TestLogWithSource:
    """Tests for explicit source logging."""

    def test_passes_source_and_fields(self):
        logger = MagicMock()

        log_with_source(logger, "client", "debug", "API request", method="GET")

        logger.debug.assert_called_once_with("API request", source="client", method="GET")

    def test_level_is_case_insensitive(self):
        logger = MagicMock()

        log_with_source(logger, "shell", "WARNING", "Careful")

        logger.warning.assert_called_once_with("Careful", source="shell")

    def test_invalid_level_raises(self):
        logger = get_logger(__name__)

        with pytest.raises(AttributeError):
            log_with_source(logger, "shell", "loud", "message")


class TestSetupLogging:
    """Tests for handler configuration."""

    def test_level_override(self):
        setup_logging(level="DEBUG", enable_file_logging=False)

        assert logging.getLogger().level == logging.DEBUG

    def test_console_handler_writes_to_stderr(self):
        import sys

        setup_logging(enable_console=True, enable_file_logging=False)

        stream_handlers = [h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler]
        assert len(stream_handlers) == 1
        assert stream_handlers[0].stream is sys.stderr

    def test_console_disabled(self):
        setup_logging(enable_console=False, enable_file_logging=False)

        assert logging.getLogger().handlers == []

    def test_file_handler_under_canvas_home(self, tmp_path):
        with patch.object(logging_module, "CANVAS_HOME", tmp_path):
            setup_logging(enable_console=False, enable_file_logging=True)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RotatingFileHandler)
        assert handlers[0].baseFilename == str(tmp_path / "logs" / "shell.jsonl")
        assert (tmp_path / "logs").is_dir()

    def test_absolute_log_path_is_kept(self, tmp_path):
        assert logging_module._resolve_log_path(str(tmp_path / "x.jsonl")) == tmp_path / "x.jsonl"
