"""
Utilities for ergo-kb core.

License: MIT
"""

from .logger_factory import configure_logging, get_logger
from .text import humanize_id, normalize_whitespace, slugify

__all__ = [
    "get_logger",
    "configure_logging",
    "humanize_id",
    "normalize_whitespace",
    "slugify",
]
