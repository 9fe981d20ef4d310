"""
Logging utilities — Python logging setup for the ``neural`` package.

Library modules only create ``logging.getLogger(__name__)`` loggers;
applications call :func:`setup_logging` once to attach handlers.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] %(name)s — %(levelname)s — %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: int | str = logging.INFO,
    log_file: str | Path | None = None,
    name: str = "neural",
) -> logging.Logger:
    """Configure and return the ``neural`` logger.

    Parameters
    ----------
    level : int | str
        Logging level (``"DEBUG"`` shows per-epoch losses).
    log_file : str | Path | None
        Optional file path that also receives the records.
    name : str
        Logger to configure.

    Calling it again only updates the level; handlers are added once.
    """
    logger = logging.getLogger(name)
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)

    if not logger.handlers:
        fmt = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        ch = logging.StreamHandler()
        ch.setFormatter(fmt)
        logger.addHandler(ch)

        if log_file is not None:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(log_file)
            fh.setFormatter(fmt)
            logger.addHandler(fh)

    return logger
