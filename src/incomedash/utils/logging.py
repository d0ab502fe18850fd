"""
Logging setup for incomedash.

Modules log through get_logger(__name__). Only the dashboard app calls
configure_logging(), which puts one stderr handler on the "incomedash"
logger (never root) and turns down the per-request chatter of the web
server that NiceGUI runs on. Nothing is written to log files.

    from incomedash.utils.logging import configure_logging, get_logger
    configure_logging()            # level from INCOMEDASH_LOG_LEVEL, else INFO
    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
LOG_DATEFMT = "%H:%M:%S"

LOG_LEVEL_ENV = "INCOMEDASH_LOG_LEVEL"

# Third-party loggers that log every request or file event while the app runs.
# Held at WARNING unless the dashboard itself is at DEBUG.
CHATTY_LOGGERS = ("uvicorn.access", "watchfiles.main")


def resolve_level(level: Optional[Union[str, int]] = None) -> int:
    """Numeric level from an int, a level name, or INCOMEDASH_LOG_LEVEL.

    Unknown names resolve to INFO.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Optional[Union[str, int]] = None, *, force: bool = False) -> None:
    """Attach a stderr handler to the incomedash logger.

    Args:
        level: Level name or number; see resolve_level().
        force: Replace existing handlers. Otherwise a second call only
            updates the level.
    """
    numeric = resolve_level(level)
    logger = logging.getLogger("incomedash")
    logger.setLevel(numeric)

    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if numeric <= logging.DEBUG else logging.WARNING)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    else:
        for h in logger.handlers:
            if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr:
                h.setLevel(numeric)
                return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric)
    console.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for name, or the package logger when name is None."""
    return logging.getLogger(name or "incomedash")
