# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Logging setup for regbox applications.

Library modules only ever call ``logging.getLogger("regbox.<component>")``;
handlers are attached here, by the CLI or by an embedding application.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER = "regbox"

CONSOLE_FORMAT = "[%(asctime)s] [%(name)s:%(levelname)s] %(message)s"
FILE_FORMAT = (
    "%(asctime)s | %(name)s | %(levelname)s | %(filename)s:%(lineno)d | %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _parse_level(level: Union[str, int]) -> int:
    """Convert string level to logging constant"""
    if isinstance(level, int):
        return level
    levels = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return levels.get(level.upper(), logging.INFO)


def configure_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[Path] = None,
    console: bool = True,
) -> logging.Logger:
    """
    Attach handlers to the ``regbox`` logger.

    Calling it again replaces the handlers installed by the previous call, so
    it is safe to reconfigure (e.g. after reloading configuration).

    Args:
        level: Log level name or constant
        log_file: Optional file, rotated after 10MB with 5 backups
        console: Whether to log to stderr

    Returns:
        The configured ``regbox`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(_parse_level(level))

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
        logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


def configure_from_config(config) -> logging.Logger:
    """Apply the logging section of a RegboxConfig"""
    return configure_logging(
        level=config.logging.level,
        log_file=config.logging.log_file,
        console=config.logging.console,
    )
