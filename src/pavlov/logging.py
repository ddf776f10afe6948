"""Logging setup for applications embedding pavlov entities."""

from __future__ import annotations

import logging

from .config import EntitySettings, get_settings

LOGGER_NAME = "pavlov"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class PavlovStreamHandler(logging.StreamHandler):
    """Stream handler installed by :func:`configure_logging`."""


def configure_logging(settings: EntitySettings | None = None) -> logging.Logger:
    """Apply the configured level to the ``pavlov`` logger tree.

    A stream handler is attached the first time this runs; later calls only
    adjust the level.
    """

    resolved = settings or get_settings()
    logger = logging.getLogger(LOGGER_NAME)
    level = logging.getLevelName(resolved.log_level)
    if not isinstance(level, int):
        msg = f"Unknown log level {resolved.log_level!r}"
        raise ValueError(msg)
    logger.setLevel(level)
    if not any(isinstance(handler, PavlovStreamHandler) for handler in logger.handlers):
        handler = PavlovStreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


__all__ = ["LOGGER_NAME", "PavlovStreamHandler", "configure_logging"]
