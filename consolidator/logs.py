import logging
import sys

LOGGER_NAME = "consolidator"
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(message)s"


def setup_logging(level="INFO"):
    """Attach a console handler to the package logger. Safe to call on every rerun."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
