"""

logger.py

Logging setup shared by the converter modules. All modules log to children of
the ``glotconv`` logger; the handlers are only attached by the command line
(or by a user calling `setup_logging` explicitly).

"""
from typing import Optional

import logging

LOGGER_NAME = "glotconv"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_CONSOLE_HANDLER = None
_FILE_HANDLER = None


def _parse_level(level: str) -> int:
    level_str = str(level).upper()
    if level_str == "ALL":
        level_str = "DEBUG"
    return getattr(logging, level_str, logging.INFO)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configuring (or updating) the package logger.

    The first call attaches a console handler at the requested level, and a
    file handler at DEBUG level if `log_file` is given. Later calls only update
    the console level, and add the file handler if one was not set up yet.
    """
    global _CONSOLE_HANDLER, _FILE_HANDLER
    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False
    formatter = logging.Formatter(LOG_FORMAT)

    if _CONSOLE_HANDLER is None:
        _CONSOLE_HANDLER = logging.StreamHandler()
        _CONSOLE_HANDLER.setFormatter(formatter)
        logger.addHandler(_CONSOLE_HANDLER)
    _CONSOLE_HANDLER.setLevel(_parse_level(level))

    if log_file is not None and _FILE_HANDLER is None:
        _FILE_HANDLER = logging.FileHandler(log_file)
        _FILE_HANDLER.setLevel(logging.DEBUG)
        _FILE_HANDLER.setFormatter(formatter)
        logger.addHandler(_FILE_HANDLER)
        logger.debug(f"Logging to file {log_file}")

    logger.setLevel(logging.DEBUG)
    return logger


def reset_logging() -> None:
    """
    Removing the handlers attached by `setup_logging`.
    """
    global _CONSOLE_HANDLER, _FILE_HANDLER
    logger = logging.getLogger(LOGGER_NAME)
    for handler in (_CONSOLE_HANDLER, _FILE_HANDLER):
        if handler is not None:
            logger.removeHandler(handler)
            handler.close()
    _CONSOLE_HANDLER = None
    _FILE_HANDLER = None
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
