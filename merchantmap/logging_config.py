"""Logging configuration helpers for the merchant map crawler."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

LOG_DIR = os.getenv("MERCHANTMAP_LOG_DIR", "logs")
LOG_FILE = os.path.join(LOG_DIR, "merchantmap.log")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

_FALSE_VALUES = {"0", "false", "no", "off"}


def log_to_file() -> bool:
    """``MERCHANTMAP_LOG_TO_FILE=0`` keeps crawler output on the console only."""
    raw = os.getenv("MERCHANTMAP_LOG_TO_FILE", "1").strip().lower()
    return raw not in _FALSE_VALUES


def _crawl_handlers(formatter: logging.Formatter) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_to_file():
        os.makedirs(os.path.dirname(LOG_FILE) or ".", exist_ok=True)
        handlers.append(
            RotatingFileHandler(LOG_FILE, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(DEFAULT_LEVEL)
    return handlers


def get_logger(name: str) -> logging.Logger:
    """Return the crawler logger *name*, attaching handlers on first use.

    Messages carry their region/category context inline because the shared
    format has no slot for ``extra`` fields.
    """
    logger = logging.getLogger(name)
    logger.setLevel(DEFAULT_LEVEL)
    logger.propagate = False

    if not logger.handlers:
        for handler in _crawl_handlers(logging.Formatter(LOG_FORMAT)):
            logger.addHandler(handler)

    return logger


def set_level(level: str | int) -> None:
    """Apply *level* to every merchantmap logger created so far."""

    if isinstance(level, str):
        level = level.upper()
    for name, logger in logging.root.manager.loggerDict.items():
        if not name.startswith("merchantmap") or not isinstance(logger, logging.Logger):
            continue
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
