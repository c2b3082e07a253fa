"""Logging setup for the SSHFS volume manager"""

import logging
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

ROOT_LOGGER = 'sshfs_volume'
JSON_FORMAT = '%(asctime)s %(name)s %(levelname)s %(message)s'
TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name: str) -> logging.Logger:
    """Return a module logger under the package namespace."""
    return logging.getLogger(name)


def setup_logging(level: str = 'INFO', log_format: str = 'json',
                  stream: Optional[object] = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Log level name
        log_format: 'json' for structured output, 'text' for plain lines
        stream: Output stream (default: stderr)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    if log_format == 'json':
        handler.setFormatter(JsonFormatter(JSON_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logger.addHandler(handler)
    logger.propagate = False
    return logger
