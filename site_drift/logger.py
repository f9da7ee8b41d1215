"""Logging setup for SiteDrift.

Everything logs through one logger, ``SiteDrift``. Its handlers write to
stderr, because stdout is reserved for command results such as snapshot
paths and drift sets. Crawl and diff progress arrives here as event lines
from :class:`site_drift.events.LoggingSink`::

    2026-10-19 12:00:01 WARNING page_failed url='https://docs.example/x' reason='timeout'
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

LOGGER_NAME: Final[str] = "SiteDrift"
DEFAULT_FORMAT: Final[str] = "%(asctime)s %(levelname)-7s %(message)s"
DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# rotated log files: 5 MiB each, three kept
_MAX_BYTES: Final[int] = 5 * 1024 * 1024
_BACKUPS: Final[int] = 3


def init_logging(
    level: Union[int, str] = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Reset the SiteDrift logger to stderr, plus *log_file* when given.

    Calling it again replaces (and closes) the handlers of the previous call,
    so the CLI and the test suite can reconfigure freely.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    for old in list(lg.handlers):
        lg.removeHandler(old)
        old.close()

    formatter = logging.Formatter(log_format, DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(path, maxBytes=_MAX_BYTES, backupCount=_BACKUPS, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        lg.addHandler(handler)

    lg.propagate = False
    return lg


logger: logging.Logger = init_logging()

__all__ = ["logger", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
