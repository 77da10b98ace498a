"""Logging configuration for the gateway."""

import logging
import sys

LOGGER_NAME = "heckproxy"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach a stdout handler to the gateway logger.

    Safe to call repeatedly: existing handlers are replaced, not stacked.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)

    # Propagate so pytest's caplog and host applications still see records
    logger.propagate = True

    return logger


logger = logging.getLogger(LOGGER_NAME)
