"""
Unit tests for settings and structured logging setup.
"""

import logging
from unittest.mock import patch

import structlog

from docrepo.platform.config import Settings
from docrepo.platform.logging import configure_logging, get_logger


def test_settings_read_environment():
    with patch.dict("os.environ", {"APP_ENV": "production", "LOG_LEVEL": "warning"}):
        settings = Settings()
    assert settings.APP_ENV == "production"
    assert settings.LOG_LEVEL == "warning"
    assert settings.APP_NAME == "docrepo"


def test_configure_logging_production_renders_json():
    configure_logging(Settings(APP_ENV="production", LOG_LEVEL="warning"))

    config = structlog.get_config()
    assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
    assert config["wrapper_class"] is structlog.make_filtering_bound_logger(logging.WARNING)


def test_configure_logging_development_renders_console():
    configure_logging(Settings(APP_ENV="development", LOG_LEVEL="debug"))

    config = structlog.get_config()
    assert isinstance(config["processors"][-1], structlog.dev.ConsoleRenderer)


def test_get_logger_binds_context():
    configure_logging(Settings(APP_ENV="test", LOG_LEVEL="info"))
    logger = get_logger("docrepo.test").bind(collection="books")
    logger.info("logger_ready")


def test_get_logger_configures_structlog_on_first_use():
    structlog.reset_defaults()
    assert not structlog.is_configured()

    get_logger("docrepo.first_use")

    assert structlog.is_configured()
