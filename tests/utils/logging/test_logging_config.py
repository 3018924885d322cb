# ABOUTME: Tests for logging configuration module
# ABOUTME: Validates dual-mode logging setup, third-party suppression and the status report

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from prd_reader.utils.logging.config import (
    NOISY_LOGGERS,
    LoggingMode,
    configure_logging,
    detect_logging_mode,
    get_logging_status,
)
from prd_reader.utils.logging.utils import generate_operation_id, get_logger, log_api_call


class TestDetectLoggingMode:
    """Test logging mode detection logic."""

    def test_detect_mode_from_env_interactive(self):
        with patch.dict(os.environ, {"PRD_READER_LOG_MODE": "interactive"}):
            assert detect_logging_mode() == LoggingMode.INTERACTIVE

    def test_detect_mode_from_env_production(self):
        with patch.dict(os.environ, {"PRD_READER_LOG_MODE": "PRODUCTION"}):
            assert detect_logging_mode() == LoggingMode.PRODUCTION

    def test_detect_mode_from_env_invalid(self):
        """Test fallback when environment variable has invalid value."""
        with (
            patch.dict(os.environ, {"PRD_READER_LOG_MODE": "invalid"}),
            patch("sys.stdout.isatty", return_value=True),
        ):
            assert detect_logging_mode() == LoggingMode.INTERACTIVE

    def test_detect_mode_from_tty_production(self):
        with patch.dict(os.environ, {}, clear=True), patch("sys.stdout.isatty", return_value=False):
            assert detect_logging_mode() == LoggingMode.PRODUCTION


class TestConfigureLogging:
    """Test logging configuration functionality."""

    def teardown_method(self):
        for logger_name in ["", *NOISY_LOGGERS, "py.warnings"]:
            logger = logging.getLogger(logger_name)
            logger.setLevel(logging.NOTSET)
        logging.captureWarnings(False)

    def test_configure_interactive_mode(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        configure_logging(mode=LoggingMode.INTERACTIVE, log_level="INFO")

        assert (tmp_path / "logs").is_dir()
        for logger_name in NOISY_LOGGERS:
            assert logging.getLogger(logger_name).level == logging.WARNING
        assert logging.getLogger("py.warnings").level == logging.ERROR

    def test_configure_production_mode(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        configure_logging(mode=LoggingMode.PRODUCTION, log_level="DEBUG")

        assert not (tmp_path / "logs").exists()
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_structlog_events_reach_stderr_sink(self, capsys):
        configure_logging(mode=LoggingMode.PRODUCTION, log_level="INFO")

        structlog.get_logger("prd_reader.test").info("hello", page_id="42")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "page_id='42'" in captured.err

    def test_custom_log_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        custom_log_file = tmp_path / "custom.log"

        configure_logging(mode=LoggingMode.INTERACTIVE, log_level="INFO", log_file=str(custom_log_file))

        from loguru import logger

        logger.info("written to custom file")
        logger.complete()
        assert "written to custom file" in custom_log_file.read_text()


class TestGetLoggingStatus:
    """Test logging status reporting."""

    def test_get_status_interactive_mode(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "logs").mkdir()

        with patch("prd_reader.utils.logging.config.detect_logging_mode", return_value=LoggingMode.INTERACTIVE):
            status = get_logging_status()

        assert status["mode"] == LoggingMode.INTERACTIVE
        assert status["log_directory"] == str(Path("logs").absolute())
        assert status["log_files"] == {"main": "logs/prd-reader.log", "errors": "logs/errors.log"}
        assert "httpx" in status["third_party_suppressed"]

    def test_get_status_production_mode(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with patch("prd_reader.utils.logging.config.detect_logging_mode", return_value=LoggingMode.PRODUCTION):
            status = get_logging_status()

        assert status["mode"] == LoggingMode.PRODUCTION
        assert status["log_directory"] is None
        assert status["log_files"] == {"main": None, "errors": None}


class TestLoggerUtils:
    def test_operation_id_is_short(self):
        assert len(generate_operation_id()) == 8
        assert generate_operation_id() != generate_operation_id()

    def test_get_logger_detects_module(self):
        assert get_logger() is not None

    @pytest.mark.asyncio
    async def test_log_api_call_passes_result_through(self):
        @log_api_call("test.api")
        async def fetch(page_id: str) -> dict:
            return {"id": page_id}

        assert await fetch("abc") == {"id": "abc"}
        assert fetch.__name__ == "fetch"

    @pytest.mark.asyncio
    async def test_log_api_call_reraises(self, capsys):
        configure_logging(mode=LoggingMode.PRODUCTION, log_level="INFO")

        @log_api_call("test.api")
        async def fetch(page_id: str) -> dict:
            raise RuntimeError("upstream down")

        with pytest.raises(RuntimeError, match="upstream down"):
            await fetch("abc")

        err = capsys.readouterr().err
        assert "API call to test.api failed" in err
        assert "target='abc'" in err
