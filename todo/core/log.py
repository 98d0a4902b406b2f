"""Logging setup for the todo backend."""

from __future__ import annotations

import logging
import sys

from .config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> logging.Logger:
    """Attach a stdout handler to the ``todo`` logger and return it."""
    logger = logging.getLogger("todo")
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def service_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"todo.services.{name}")
