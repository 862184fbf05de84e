"""
Pytest configuration and fixtures for all tests.

Provides shared setup/teardown for the logging service.

License: MIT
"""

import pytest

from ergo_kb_core.logging_service import LoggingService


@pytest.fixture(autouse=True)
def reset_logging_service():
    """Reset LoggingService state before each test."""
    LoggingService.reset()
    LoggingService.configure_logging(level="DEBUG", format="json")

    yield

    LoggingService.reset()
