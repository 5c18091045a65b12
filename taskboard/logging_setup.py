"""
Logging configuration for the Taskboard application.
"""

import logging
import sys


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the `taskboard` loggers with a single stderr handler.

    Safe to call more than once; an existing handler is replaced.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.setLevel(log_level)

    logger = logging.getLogger("taskboard")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(log_level)

    # Keep the server's access log quiet unless something goes wrong.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
