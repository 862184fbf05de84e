"""
Unit tests for the logger_factory convenience wrappers.
"""

import pytest

from ergo_kb_core.config import settings
from ergo_kb_core.logging_service import LoggingService
from ergo_kb_core.utils import configure_logging, get_logger


@pytest.fixture
def unconfigured():
    LoggingService.reset()
    yield


def test_get_logger_returns_bound_logger():
    logger = get_logger("ergo_kb.test")

    for method in ("debug", "info", "warning", "error", "critical"):
        assert hasattr(logger, method)


def test_get_logger_uses_existing_configuration():
    logger = get_logger("ergo_kb.test")

    assert logger is LoggingService.get_logger("ergo_kb.test")
    assert LoggingService._log_level == "DEBUG"


def test_get_logger_configures_from_settings_on_first_use(unconfigured):
    """Library use without an explicit configure call still logs."""
    get_logger("ergo_kb.test")

    assert LoggingService.is_configured()
    assert LoggingService._log_level == settings.log_level
    assert LoggingService._config.format == settings.log_format


def test_configure_logging_explicit_values(unconfigured):
    configure_logging(level="ERROR", format="console")

    assert LoggingService._log_level == "ERROR"
    assert LoggingService._config.format == "console"


def test_configure_logging_falls_back_per_argument(unconfigured):
    configure_logging(level="INFO")

    assert LoggingService._log_level == "INFO"
    assert LoggingService._config.format == settings.log_format


def test_configure_logging_twice_raises(unconfigured):
    configure_logging()

    with pytest.raises(RuntimeError):
        configure_logging()
