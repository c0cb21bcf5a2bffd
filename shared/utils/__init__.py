"""Shared utilities: settings and logging."""

import logging as _logging

from shared.utils.config import Settings, get_settings
from shared.utils.logging import JSONFormatter, LoggerAdapter, setup_logging


def get_logger(name: str) -> _logging.Logger:
    """
    Get a module logger.

    Records propagate to the handlers installed by ``setup_logging``.

    Args:
        name: Logger name (typically __name__)
    """
    return _logging.getLogger(name)


__all__ = [
    "get_settings",
    "Settings",
    "setup_logging",
    "JSONFormatter",
    "LoggerAdapter",
    "get_logger",
]
