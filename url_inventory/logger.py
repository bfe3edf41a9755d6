# === FILE: url_inventory/logger.py ===
"""Logging for **URL Inventory**.

All modules share one logger::

    from url_inventory.logger import logger
    logger.info("Crawl started")

It writes to *stderr*, keeping stdout free for the CLI's JSON. The CLI calls
:func:`init_logging` once to set the level and an optional rotating log file.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOGGER_NAME: Final[str] = "URLInventory"
_MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024


def init_logging(
    level: Union[int, str] = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Replace the handlers of the project logger: stderr plus, if given, *log_file*."""
    lg = logging.getLogger(_LOGGER_NAME)
    lg.setLevel(level)
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=_MAX_LOG_BYTES, backupCount=3, encoding="utf-8")
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        lg.addHandler(handler)

    lg.propagate = False
    return lg


logger: logging.Logger = init_logging(level="WARNING")

__all__ = ["logger", "init_logging", "DEFAULT_FORMAT"]
