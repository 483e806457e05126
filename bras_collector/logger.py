"""Logging set-up: console plus a size-rotated log file."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "bras_collector"
LOG_FILE_NAME = "collector.log"
_FORMAT = "[%(asctime)s.%(msecs)03d] [%(levelname)s] [%(thread)d] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logger: logging.Logger | None = None
_handlers: list[logging.Handler] = []


def init_logging(log_dir="./logs", max_mb: int = 100, max_files: int = 10) -> logging.Logger:
    """Send the package's logs to stdout (INFO and up) and a rotating file (DEBUG and up)."""
    global _logger
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    for handler in _handlers:
        logger.removeHandler(handler)
        handler.close()
    _handlers.clear()

    formatter = logging.Formatter(_FORMAT, _DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(formatter)

    file_handler = RotatingFileHandler(
        directory / LOG_FILE_NAME,
        maxBytes=max_mb * 1024 * 1024,
        backupCount=max_files,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    for handler in (console, file_handler):
        logger.addHandler(handler)
        _handlers.append(handler)
    logger.setLevel(logging.DEBUG)

    _logger = logger
    logger.info("Logger initialized, log_dir=%s", log_dir)
    return logger


def set_level(level: int | str) -> None:
    """Change the package logger's level; accepts a number or a level name."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level}")
        level = resolved
    logging.getLogger(LOGGER_NAME).setLevel(level)


def get_logger() -> logging.Logger | None:
    """The logger configured by init_logging, or None before it is called."""
    return _logger