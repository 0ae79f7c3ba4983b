"""
logger_setup.py - Logging Configuration

Console output for the CLI and GUI, plus an optional log file.
"""

from pathlib import Path
from typing import Optional, Union
import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_level(value: Optional[str]) -> int:
    """
    Map a verbosity option to a logging level

    None means info, an empty string means debug.

    Raises:
        ValueError: Unknown level name
    """
    if value is None:
        return logging.INFO
    if not value:
        return logging.DEBUG
    try:
        return LEVELS[value.lower()]
    except KeyError:
        raise ValueError(
            f"'{value}' is not a valid logging level - please choose one of {', '.join(LEVELS)}"
        ) from None


def setup_logging(level: int = logging.INFO,
                  log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Configure the "croner" logger

    Args:
        level: Console level
        log_file: Optional file receiving the same records at debug level

    Returns:
        The configured logger
    """
    logger = logging.getLogger("croner")
    logger.setLevel(min(level, logging.DEBUG))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
