# server/core/logging.py

import logging
from core.config import LOG_LEVEL


def get_logger(name: str, level: str = LOG_LEVEL) -> logging.Logger:
    """
    Returns a logger writing to stderr with the application's format.
    Handlers are attached once per logger name.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level, logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))
        logger.addHandler(handler)

    return logger
