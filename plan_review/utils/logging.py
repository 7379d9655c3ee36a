"""Centralized logging configuration.

All module loggers live under the ``plan_review`` namespace and share one
stdout handler installed on the namespace root.
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "plan_review"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Install the stdout handler on the namespace root and set its level.

    Safe to call repeatedly; the handler is only added once.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(_level(level))

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)

    return root


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)
        level: Optional log level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        logging.Logger: Logger that propagates to the namespace handler
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        configure_logging()

    logger = logging.getLogger(name)
    if level:
        logger.setLevel(_level(level))
    return logger
