"""Logging setup for wtstate."""

from __future__ import annotations

import os
import sys

from loguru import logger

LOG_FORMAT = "<dim>{time:HH:mm:ss}</dim> <level>{level: <7}</level> {message}"


def configure_logging(debug: bool = False) -> None:
    """Send log records to stderr so stdout stays parseable.

    Debug output is enabled by the flag or by WTSTATE_DEBUG=1.
    """
    if os.getenv("WTSTATE_DEBUG") == "1":
        debug = True
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug else "WARNING", format=LOG_FORMAT)
