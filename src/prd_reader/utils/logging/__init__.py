# ABOUTME: Logging configuration and structured logger helpers
# ABOUTME: Exports dual-mode setup, status reporting and call-tracking decorators

from .config import LoggingMode, configure_logging, get_logging_status
from .utils import get_logger, log_api_call, with_document_context

__all__ = [
    # Configuration
    "LoggingMode",
    "configure_logging",
    "get_logging_status",
    # Utilities
    "get_logger",
    "log_api_call",
    "with_document_context",
]
