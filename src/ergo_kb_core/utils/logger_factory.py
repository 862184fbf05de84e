"""
Logger Factory - Convenience wrapper for LoggingService.

Provides get_logger() and configure_logging() so modules do not import
LoggingService directly.

License: MIT
"""

from typing import Optional

import structlog

from ergo_kb_core.config import settings
from ergo_kb_core.logging_service import LoggingService


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a module/component-specific logger.

    Unlike LoggingService.get_logger(), this configures logging from
    ``settings`` on first use when the application has not done so, which
    keeps the loaders usable as a plain library.

    Args:
        name: Logger name (typically __name__)

    Returns:
        BoundLogger instance

    Example:
        ```python
        from ergo_kb_core.utils import get_logger

        logger = get_logger(__name__)
        logger.info("file_loaded", path="kb.json", chunk_count=8)
        ```
    """
    if not LoggingService.is_configured():
        configure_logging()
    return LoggingService.get_logger(name)


def configure_logging(level: Optional[str] = None, format: Optional[str] = None) -> None:
    """
    Configure structured logging infrastructure.

    Uses settings.log_level / settings.log_format for any argument left
    as None. Call once at application startup.

    Raises:
        ValueError: If level or format is invalid
        RuntimeError: If called after logging already configured
    """
    if level is None:
        level = settings.log_level
    if format is None:
        format = settings.log_format

    LoggingService.configure_logging(level=level, format=format)
