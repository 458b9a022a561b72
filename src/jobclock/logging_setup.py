"""Logging configuration for the Jobclock command-line tool."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: int = logging.WARNING) -> None:
    """Send jobclock diagnostics to stderr.

    Safe to call more than once: earlier handlers are replaced.
    """
    logger = logging.getLogger("jobclock")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
