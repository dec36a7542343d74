"""
Logging setup (loguru).

All workflow modules log through the helpers below so every line
carries the [verify] prefix. Challenge tokens must never be passed in.
"""

import sys

from loguru import logger

CONTEXT_PREFIX = "[verify]"


def setup_logger(level: str = "INFO") -> None:
    """Replace loguru's default sink with a single stderr sink at `level`."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def log_success(message: str) -> None:
    logger.success(f"{CONTEXT_PREFIX} {message}")


def log_warning(message: str) -> None:
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")
