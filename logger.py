"""Logging configuration for the AEZA balance bot."""

import logging
import sys
from datetime import datetime
from typing import Optional

import config


def _resolve_level(name: Optional[str]) -> int:
    """Map a level name from LOG_LEVEL to a logging constant (INFO if unknown)."""
    level = logging.getLevelName((name or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Set up the bot logger: a file per day plus the console when attached.

    Args:
        level: Level name such as "DEBUG"; defaults to config.LOG_LEVEL
    """
    logger = logging.getLogger("aeza_balance_bot")
    logger.setLevel(_resolve_level(level or config.LOG_LEVEL))
    logger.handlers.clear()

    log_file = config.LOG_DIR / f"{datetime.now().strftime('%Y-%m-%d')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    logger.addHandler(file_handler)

    # Console only when attached to a terminal
    if sys.stdout is not None and sys.stdout.isatty():
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(message)s",
            datefmt="%H:%M:%S"
        ))
        logger.addHandler(console_handler)

    return logger


logger = setup_logging()
