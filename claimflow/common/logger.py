"""Logging setup for claimflow.

Module loggers are created with ``logging.getLogger(__name__)`` and
propagate to the ``claimflow`` package logger, which ``configure_logging``
wires to a rotating log file and/or the console according to settings.
"""

import logging
import logging.handlers
import os
from typing import List, Optional

from claimflow.core.config import Settings, get_settings

PACKAGE_LOGGER = "claimflow"
LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"  # ISO 8601

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_level(level: str) -> int:
    """Convert a level name from settings to a logging level.

    Raises:
        ValueError: If the name is not a standard level
    """
    name = level.upper()
    if name not in _LEVELS:
        raise ValueError(f"Invalid log level: {level}. Must be one of: {', '.join(_LEVELS)}")
    return getattr(logging, name)


def _build_handlers(settings: Settings) -> List[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: List[logging.Handler] = []

    if settings.file_logging:
        os.makedirs(settings.log_dir, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            os.path.join(settings.log_dir, f"{PACKAGE_LOGGER}.log"),
            maxBytes=settings.log_max_bytes,
            backupCount=settings.log_backup_count,
        ))

    if settings.console_logging:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Configure the ``claimflow`` package logger from settings.

    The level is applied on every call; handlers are only attached once.

    Args:
        settings: Settings to read; the cached application settings if omitted

    Returns:
        The package logger
    """
    settings = settings or get_settings()
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(parse_level(settings.log_level))

    if not logger.handlers:
        for handler in _build_handlers(settings):
            logger.addHandler(handler)

    return logger
