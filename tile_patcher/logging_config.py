#!/usr/bin/env python3
"""
Logging for the tile patcher
Every module logs under the 'tile_patcher' logger; the command line driver
decides where those records go
"""

import logging
import sys
from typing import Optional

LOGGER_NAME = 'tile_patcher'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%H:%M:%S'


def _make_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    return handler


def setup_logging(level: str = "INFO",
                  log_file: Optional[str] = None) -> logging.Logger:
    """
    Route tile patcher log records to stdout and, optionally, a file.

    Calling this again replaces the handlers installed by an earlier call.

    Args:
        level: Name of the threshold level, e.g. "DEBUG" for one line per tile
        log_file: Path of a log file to append to as well

    Returns:
        The 'tile_patcher' logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    logger.addHandler(_make_handler(logging.StreamHandler(sys.stdout), numeric_level))

    if log_file:
        try:
            logger.addHandler(_make_handler(logging.FileHandler(log_file), numeric_level))
        except OSError as e:
            logger.warning(f"Log file {log_file} unavailable, logging to console only: {e}")

    # Records stop here instead of reaching the root logger
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Logger for one module, below 'tile_patcher'.

    Accepts either a bare module name ('edit_script') or a dotted
    ``__name__`` that already starts with 'tile_patcher'.
    """
    if name == LOGGER_NAME or name.startswith(f'{LOGGER_NAME}.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{LOGGER_NAME}.{name}')
