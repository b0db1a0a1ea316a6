# -*- coding: utf-8 -*-
"""
Logging configuration.

Levels, formats, file location and rotation all come from Config, so a
deployment tunes logging through FORMFLOW_* variables without code changes.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

APP_LOGGER_NAME = "formflow"

# Will be set by setup_logger
_logger: Optional[logging.Logger] = None


def _resolve_level(level: Union[int, str]) -> int:
    """Accept a logging constant or its name ("debug", "WARNING")."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def _build_handler(handler: logging.Handler, level: int, fmt: str,
                   datefmt: Optional[str] = None) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def setup_logger(level: Union[int, str, None] = None,
                 console_level: Union[int, str, None] = None,
                 config=None) -> logging.Logger:
    """
    Configure the application logger with a rotating file and a console handler.

    Args:
        level: File handler level. Defaults to Config.LOG_LEVEL
        console_level: Console handler level. Defaults to Config.CONSOLE_LOG_LEVEL
        config: Configuration object. Defaults to app.config.Config

    Raises:
        ValueError: a level name logging does not know
    """
    global _logger

    if config is None:
        # Import here to avoid circular imports
        from app.config import Config as config

    file_level = _resolve_level(config.LOG_LEVEL if level is None else level)
    stream_level = _resolve_level(config.CONSOLE_LOG_LEVEL if console_level is None else console_level)

    config.LOGS_DIR.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(min(file_level, stream_level))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_build_handler(
        RotatingFileHandler(
            config.LOGS_DIR / config.LOG_FILE,
            maxBytes=config.LOG_MAX_BYTES,
            backupCount=config.LOG_BACKUP_COUNT,
            encoding="utf-8",
        ),
        file_level, config.LOG_FORMAT, config.DATETIME_FORMAT,
    ))
    logger.addHandler(_build_handler(
        logging.StreamHandler(sys.stdout), stream_level, config.CONSOLE_LOG_FORMAT,
    ))

    _logger = logger
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child of the application logger, configuring it on first use."""
    global _logger

    if _logger is None:
        _logger = setup_logger()

    return _logger.getChild(name)
