"""Logging setup for applications that want the library's log output."""

import sys

from loguru import logger


LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(level: str = "INFO", sink=sys.stderr) -> int:
    """Enable this library's log records and route them to ``sink``.

    Returns the loguru handler id so callers can remove it again.
    """
    logger.enable("gemini_client")
    return logger.add(sink, format=LOG_FORMAT, level=level, filter="gemini_client")
