# ABOUTME: Logging configuration: structlog events rendered and written through loguru sinks
# ABOUTME: Dual-mode operation: interactive CLI logs to files, production emits JSON on stderr

import logging
import os
import sys
from pathlib import Path
from typing import Any

import structlog
from loguru import logger

NOISY_LOGGERS = ["httpx", "httpcore", "urllib3", "asyncio", "mcp", "LiteLLM", "litellm", "dspy", "google.auth"]


class LoggingMode:
    """Logging mode constants."""

    INTERACTIVE = "interactive"
    PRODUCTION = "production"


def detect_logging_mode() -> str:
    """Detect whether we're running in interactive or production mode."""
    mode = os.getenv("PRD_READER_LOG_MODE")
    if mode and mode.lower() in [LoggingMode.INTERACTIVE, LoggingMode.PRODUCTION]:
        return mode.lower()

    return LoggingMode.INTERACTIVE if sys.stdout.isatty() else LoggingMode.PRODUCTION


def setup_third_party_logging() -> None:
    """Keep HTTP, MCP and LLM client chatter out of the console."""
    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    logging.getLogger("py.warnings").setLevel(logging.ERROR)


def _stderr_sink(message: str) -> None:
    # Looked up per write, sys.stderr may be swapped after configuration
    sys.stderr.write(message)


class LoguruLogger:
    """structlog output logger that hands rendered events to the loguru sinks."""

    def __init__(self, *args: Any):
        pass

    def debug(self, message: str) -> None:
        logger.opt(depth=1).debug(message)

    def info(self, message: str) -> None:
        logger.opt(depth=1).info(message)

    def warning(self, message: str) -> None:
        logger.opt(depth=1).warning(message)

    def error(self, message: str) -> None:
        logger.opt(depth=1).error(message)

    def critical(self, message: str) -> None:
        logger.opt(depth=1).critical(message)

    exception = error
    msg = info


def setup_structlog(log_level: str) -> None:
    """Render structlog events as key=value text and send them through loguru."""
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=LoguruLogger,
        cache_logger_on_first_use=False,
    )


def configure_logging(mode: str | None = None, log_level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging using loguru and structlog.

    Args:
        mode: Logging mode (interactive/production), auto-detected if None
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Custom log file path, uses default if None
    """
    if mode is None:
        mode = detect_logging_mode()

    setup_third_party_logging()
    setup_structlog(log_level)

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(numeric_level)

    # Remove default loguru handler
    logger.remove()

    if mode == LoggingMode.INTERACTIVE:
        log_dir = Path("logs")
        try:
            log_dir.mkdir(exist_ok=True)
        except OSError:
            # Read-only working directory, fall back to stderr
            logger.add(_stderr_sink, level=log_level, format="{time} | {level} | {name} | {message}", serialize=True)
            return

        log_file_path = log_file or str(log_dir / "prd-reader.log")

        logger.add(
            log_file_path,
            level=log_level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="10 MB",
            retention="7 days",
        )

        logger.add(
            log_dir / "errors.log",
            level="ERROR",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            backtrace=True,
            diagnose=True,
        )
    else:
        logger.add(_stderr_sink, level=log_level, format="{time} | {level} | {name} | {message}", serialize=True)


def get_logging_status() -> dict[str, Any]:
    """Get current logging configuration status."""
    mode = detect_logging_mode()
    log_dir = Path("logs")

    return {
        "mode": mode,
        "log_directory": str(log_dir.absolute()) if log_dir.exists() else None,
        "log_files": {
            "main": str(log_dir / "prd-reader.log") if mode == LoggingMode.INTERACTIVE else None,
            "errors": str(log_dir / "errors.log") if mode == LoggingMode.INTERACTIVE else None,
        },
        "third_party_suppressed": list(NOISY_LOGGERS),
    }

