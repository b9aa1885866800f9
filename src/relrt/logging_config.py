"""
Logging configuration.

Every module logs through ``logging.getLogger(__name__)``, below the
``relrt`` namespace configured here. Hit computations log their
intermediate values (redshift factors, path lengths, increments) at DEBUG
level.
"""

import logging
import sys
from typing import Optional, Union

from .config import get_log_level

_debug = False
_previous_level = logging.WARNING


def setup_logging(level: Optional[Union[int, str]] = None,
                  log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the ``relrt`` logger.

    Parameters
    ----------
    level : int or str, optional
        Logging level. Default: the RELRT_LOG_LEVEL environment variable,
        or WARNING.
    log_file : str, optional
        Path of a file receiving a copy of the log.

    Returns
    -------
    logging.Logger
    """
    if level is None:
        level = get_log_level()
    logger = logging.getLogger("relrt")
    logger.setLevel(level)

    # Avoid duplicate records when called more than once
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def verbose(level: Optional[int] = None) -> int:
    """Set (if given) and return the level of the ``relrt`` logger."""
    logger = logging.getLogger("relrt")
    if level is not None:
        logger.setLevel(level)
    return logger.getEffectiveLevel()


def debug(mode: Optional[bool] = None) -> bool:
    """
    Switch debug output on or off and return the current mode.

    Turning debug on lowers the ``relrt`` level to DEBUG; turning it off
    restores the level in effect before.
    """
    global _debug, _previous_level
    if mode is not None and bool(mode) != _debug:
        if mode:
            _previous_level = verbose()
            verbose(logging.DEBUG)
        else:
            verbose(_previous_level)
        _debug = bool(mode)
    return _debug
