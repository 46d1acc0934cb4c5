"""Logging helpers shared by the API, the CLI and the service adapters.

Modules grab a logger with ``get_logger(__name__)``; entry points call
``configure_logging`` once with the level from :mod:`pagehub.config`.
"""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """Return a logger that writes to stderr with the standard format.

    The handler is attached once per logger name, so repeated calls are
    cheap.  The level is left unset and therefore inherited from the root
    logger configured by :func:`configure_logging`.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
        logger.addHandler(handler)

    return logger


def configure_logging(level: str = "INFO") -> None:
    """Set the level for every pagehub logger.

    Unknown level names fall back to ``INFO``.
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.getLogger("pagehub").setLevel(log_level)
