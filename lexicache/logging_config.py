"""
Logging setup for command-line use.

Library modules only create ``logging.getLogger(__name__)`` loggers and
never configure handlers; applications embedding the client configure
logging themselves. The warm-up CLI calls ``configure_logging``.
"""

from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(debug: bool = False) -> logging.Logger:
    """
    Install a console handler on the ``lexicache`` logger.

    Args:
        debug: Emit queue and cache tracing (DEBUG) instead of INFO and up

    Returns:
        The package logger
    """
    logger = logging.getLogger("lexicache")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Avoid adding handlers multiple times
    if not logger.handlers:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console)

    return logger
