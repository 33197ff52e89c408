"""Logging helpers for wcm commands."""

import logging
from pathlib import Path
from typing import Optional

_LOGGER_NAME = "wcm"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-scoped logger under the wcm hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure the wcm logger with console output and an optional file sink.

    Args:
        level: One of LOG_LEVELS.
        log_file: Optional path that receives a timestamped copy of the log.

    Returns:
        The configured top-level wcm logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations don't duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(numeric_level)
    stream_handler.setFormatter(logging.Formatter("[wcm] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger
