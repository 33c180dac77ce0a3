"""Shared building blocks of the Smart DMS desktop client.

Provides get_logger(...) used across the base and features packages.
"""

import logging
from logging import Logger
from typing import Optional

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str, level: Optional[int] = None) -> Logger:
    """Return a logger for the given module name.

    - When setup_logging() has configured the root logger, records simply
      propagate to it.
    - Otherwise (scripts, services used without the UI) a console handler is
      attached once so messages are not lost.

    Args:
        name: Logger name (typically __name__)
        level: Optional explicit level for this logger.

    Returns:
        logging.Logger: logger instance
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)

    if not logging.getLogger().handlers and not logger.handlers:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
        logger.addHandler(console)
        if logger.level == logging.NOTSET:
            logger.setLevel(logging.INFO)

    return logger
