"""
Unit tests for the logging configuration module.

Covers format selection, console and rotating file handlers, module log
levels and the options read from the settings.
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from medops.core import logging_config


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.mark.parametrize(
    "fmt, expected",
    [
        ("json", logging_config.JSON_FORMAT),
        ("simple", logging_config.SIMPLE_FORMAT),
        ("detailed", logging_config.DETAILED_FORMAT),
        ("anything-else", logging_config.DETAILED_FORMAT),
    ],
)
def test_format_selection(fmt, expected):
    assert logging_config._format_for(fmt) == expected


def test_console_only(restore_root_logger):
    logging_config.setup_logging(log_level="warning", log_format="simple", use_settings=False)

    handlers = restore_root_logger.handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.StreamHandler)
    assert handlers[0].level == logging.WARNING
    assert handlers[0].formatter._fmt == logging_config.SIMPLE_FORMAT


def test_file_handler(restore_root_logger, tmp_path):
    logging_config.setup_logging(log_level="INFO", log_dir=str(tmp_path / "logs"), use_settings=False)

    file_handlers = [h for h in restore_root_logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].baseFilename == str(tmp_path / "logs" / "medops.log")
    assert file_handlers[0].level == logging.DEBUG
    assert file_handlers[0].maxBytes == logging_config.LOG_FILE_MAX_BYTES


def test_settings_turn_file_logging_on(restore_root_logger, tmp_path, monkeypatch):
    from medops.server.core.config import settings

    monkeypatch.setattr(settings, "enable_file_logging", True)
    monkeypatch.setattr(settings, "log_file_dir", str(tmp_path))

    logging_config.setup_logging()

    assert any(isinstance(h, RotatingFileHandler) for h in restore_root_logger.handlers)


def test_repeated_setup_does_not_duplicate_handlers(restore_root_logger):
    logging_config.setup_logging(use_settings=False)
    logging_config.setup_logging(use_settings=False)
    assert len(restore_root_logger.handlers) == 1


def test_module_levels_applied(restore_root_logger):
    logging_config.setup_logging(use_settings=False)

    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    assert logging.getLogger("medops.server.services").level == logging.DEBUG
    assert logging.getLogger("medops.core.rules").level == logging.DEBUG


def test_get_logger():
    logger = logging_config.get_logger("medops.server.services.leads")
    assert logger.name == "medops.server.services.leads"
    assert logger is logging.getLogger("medops.server.services.leads")


def test_options_from_settings(monkeypatch):
    from medops.server.core.config import settings

    monkeypatch.setattr(settings, "log_level", "debug")
    monkeypatch.setattr(settings, "log_format", "json")
    monkeypatch.setattr(settings, "enable_file_logging", False)

    options = logging_config.options_from_settings()

    assert options == logging_config.LoggingOptions(level="DEBUG", format="json", file_dir=None)
