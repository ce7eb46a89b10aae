"""Logging configuration using loguru.

The library logs under the ``sheettable`` name and is disabled until
``setup_logging`` is called.
"""

import sys

from loguru import logger


def format_record(_record: dict) -> str:
    """Format log record for terminal output."""
    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>\n"
        "{exception}"
    )


def setup_logging(json_logs: bool = False, log_level: str = "INFO") -> None:
    """Configure loguru and enable sheettable's log messages.

    Args:
        json_logs: If True, output logs as JSON
        log_level: Minimum log level to output
    """
    # Remove default handler
    logger.remove()

    if json_logs:
        logger.add(
            sys.stderr,
            format="{message}",
            level=log_level,
            serialize=True,
        )
    else:
        logger.add(
            sys.stderr,
            format=format_record,
            level=log_level,
            colorize=True,
        )

    logger.enable("sheettable")
