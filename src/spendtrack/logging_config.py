"""Logging setup for the command line interface."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def init_logging(debug: bool = False) -> None:
    """Send spendtrack log records to stderr.

    Only warnings are shown unless ``debug`` is set, so command output stays
    readable.
    """
    logger = logging.getLogger("spendtrack")
    logger.handlers.clear()
    level = logging.DEBUG if debug else logging.WARNING
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
