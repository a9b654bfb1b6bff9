"""Logging setup for the command line."""

import logging
from typing import Optional

from bizsplit.config import get_log_level

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the bizsplit logger to write to stderr.

    Safe to call more than once; the handler is installed only once.
    """
    logger = logging.getLogger("bizsplit")
    logger.setLevel(level or get_log_level())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
