"""
deck_signals/logger.py
Shared logger for the feature engine.
"""

import logging
import os

LOGGER_NAME = "deck_signals"
LOG_LEVEL_ENV = "DECK_SIGNALS_LOG_LEVEL"
LOG_FORMAT = "<%(asctime)s> %(levelname)s %(name)s: %(message)s"


def create_logger():
    """
    Returns the package logger, attaching a stream handler the first time.
    The level is read from DECK_SIGNALS_LOG_LEVEL (default WARNING).
    """
    logger = logging.getLogger(LOGGER_NAME)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

        level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
        logger.setLevel(getattr(logging, level_name, logging.WARNING))

    return logger
