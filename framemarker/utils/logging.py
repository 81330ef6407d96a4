"""Console logging setup shared by the GUI launcher and scripts."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "framemarker-console"


def setup_logging(level: str | int = "INFO") -> None:
    """Install a single console handler on the ``framemarker`` logger.

    Calling again only updates the level; handlers are never duplicated.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger = logging.getLogger("framemarker")
    logger.setLevel(level)
    for handler in logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            return
    console = logging.StreamHandler(sys.stderr)
    console.set_name(_HANDLER_NAME)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(console)


__all__ = ["setup_logging", "LOG_FORMAT"]
