"""Logging setup."""

import sys

from loguru import logger


def configure_logging(verbose: bool = False) -> None:
    """Replace loguru's default sink with a single stderr sink.

    Args:
        verbose: Log at DEBUG instead of INFO
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
