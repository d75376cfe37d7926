"""Logging for the dashboard: a single "school" logger with one child per module."""

import logging
import os

ROOT_LOGGER = "school"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Attach one console handler to the "school" logger; safe to call repeatedly."""
    level = (level or os.getenv("SCHOOL_LOG_LEVEL", "INFO")).upper()
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level, logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(ROOT_LOGGER).getChild(name)


setup_logging()
