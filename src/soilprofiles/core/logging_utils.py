"""Logging setup for soilprofiles."""

import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s'
PACKAGE_LOGGER = 'soilprofiles'


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the package logger with a console handler and optional file handler.

    Repeated calls replace previously installed handlers instead of stacking them.

    Args:
        level: Logging level (name or number)
        log_file: Optional path of a log file to write alongside the console

    Returns:
        The configured ``soilprofiles`` logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug(f"Logging configured at level {logging.getLevelName(level)}")
    return logger


# Silence "No handler found" warnings for library users
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())
