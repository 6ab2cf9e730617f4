"""
Logging setup for MedOps.

One console handler always, plus a rotating ``medops.log`` file when file
logging is enabled. Levels and format come from the application settings
(``MEDOPS_LOG_LEVEL``, ``LOG_FORMAT``, ``LOG_FILE_DIR``,
``ENABLE_FILE_LOGGING``); workflow code under ``medops.core.rules`` and
``medops.server.services`` logs at DEBUG while library chatter is held at
WARNING.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, NamedTuple, Optional

LOG_FILE_NAME = "medops.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"
DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"line": %(lineno)d, "message": "%(message)s"}'
)
_FORMATS = {"simple": SIMPLE_FORMAT, "detailed": DETAILED_FORMAT, "json": JSON_FORMAT}

MODULE_LOG_LEVELS: Dict[str, str] = {
    "medops.core.rules": "DEBUG",
    "medops.core.database": "INFO",
    "medops.server.services": "DEBUG",
    "medops.server.middleware": "INFO",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "aiosqlite": "WARNING",
    "passlib": "WARNING",
    "httpx": "WARNING",
    "uvicorn.access": "INFO",
}


class LoggingOptions(NamedTuple):
    level: str
    format: str
    file_dir: Optional[str]


def _format_for(fmt: str) -> str:
    return _FORMATS.get(fmt, DETAILED_FORMAT)


def options_from_settings() -> LoggingOptions:
    """Read the logging options from the application settings."""
    from medops.server.core.config import settings

    return LoggingOptions(
        level=settings.log_level.upper(),
        format=settings.log_format,
        file_dir=settings.log_file_dir if settings.enable_file_logging else None,
    )


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_dir: Optional[str] = None,
    use_settings: bool = True,
) -> None:
    """
    Configure the root logger.

    Explicit arguments win over the settings. With ``use_settings=False`` only
    the arguments are used and no file is written unless ``log_dir`` is given.
    Calling it again replaces the handlers of the previous call.
    """
    defaults = options_from_settings() if use_settings else LoggingOptions("INFO", "detailed", None)
    level = (log_level or defaults.level).upper()
    fmt = log_format or defaults.format
    file_dir = log_dir or defaults.file_dir

    formatter = logging.Formatter(_format_for(fmt), datefmt=DATE_FORMAT)
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if isinstance(handler, RotatingFileHandler):
            handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if file_dir:
        Path(file_dir).mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            Path(file_dir) / LOG_FILE_NAME, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
        )
        # the file keeps everything; the console is filtered
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root.info(f"Logging configured: level={level}, format={fmt}, file={file_dir or 'off'}")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


setup_logging()
