"""
utils/logger.py
───────────────
Loguru sinks for the matching engine.

Console lines carry the acting user when one is bound (see `user_logger`);
the file sink is serialized JSON so swipe, match and session records can be
grepped or loaded into pandas later.
"""

import sys

from loguru import logger

from config.settings import get_settings

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[user_id]: <10}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logger(level: str | None = None) -> None:
    """(Re)install the console and file sinks. Safe to call more than once."""
    settings = get_settings()
    settings.log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.configure(extra={"user_id": "-"})

    logger.add(
        sys.stderr,
        level=level or settings.log_level,
        format=_CONSOLE_FORMAT,
        colorize=not settings.is_production,
        backtrace=not settings.is_production,
    )
    logger.add(
        str(settings.log_file),
        level="DEBUG",
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        serialize=True,
        enqueue=True,
    )


def user_logger(user_id: str, **extra):
    """Logger with `user_id` (and any extra fields) bound into every record."""
    return logger.bind(user_id=user_id, **extra)


setup_logger()

__all__ = ["logger", "setup_logger", "user_logger"]
