# kiwisdk/log_config.py
"""Logging setup for kiwisdk, built on Loguru.

Every kiwisdk module logs through the ``logger`` re-exported here. Nothing is
configured on import; an application that wants the client's output calls
:func:`configure_logging` once, optionally restricted to kiwisdk's own records
so that other libraries logging through Loguru stay quiet.
"""

import sys

from loguru import logger

KIWI_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(
    level: str = "INFO", sink=sys.stderr, *, kiwi_only: bool = False
):
    """
    Replaces Loguru's handlers with a single kiwisdk-formatted one.

    Args:
        level: The minimum logging level (e.g., "DEBUG", "INFO", "WARNING").
        sink: The output sink (e.g., sys.stderr, "kiwi.log").
        kiwi_only: Only emit records logged from the ``kiwisdk`` package.
    """
    level = level.upper()
    logger.remove()
    logger.add(
        sink,
        level=level,
        format=KIWI_LOG_FORMAT,
        filter="kiwisdk" if kiwi_only else None,
        colorize=sink is sys.stderr,
        backtrace=True,
        diagnose=False,  # locals may hold passwords and tokens
    )
    scope = "kiwisdk records only" if kiwi_only else "all records"
    logger.info(f"kiwisdk logging configured: level={level}, {scope}")
