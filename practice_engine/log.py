"""Loguru sink setup for hosts embedding the practice engine."""

from __future__ import annotations

import sys

from loguru import logger

LOG_FORMAT = "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {name}:{function} - {message}"


def configure_logging(level: str | None = None) -> None:
    """
    Replace loguru's default handler with a stderr sink.

    Args:
        level: Minimum level (defaults to Settings.log_level)
    """
    if level is None:
        from .config import get_settings

        level = get_settings().log_level

    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
