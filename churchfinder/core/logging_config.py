"""
Logging configuration for the API and the maintenance scripts.

``setup_logging`` attaches a single console handler to the root logger.
Calling it again is a no-op, so the app factory, the scripts and the test
suite can all call it freely.
"""

import logging
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once.

    Parameters
    ----------
    level : Optional[str]
        Logging level name (e.g. ``"DEBUG"``). Falls back to the
        ``LOG_LEVEL`` setting when omitted.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    if level is None:
        from churchfinder.core.config import settings
        level = settings.LOG_LEVEL

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
