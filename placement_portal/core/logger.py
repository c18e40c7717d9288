"""
Logger setup - loguru sinks for the API process.

Console output always; a file sink only when LOG_FILE is configured.
"""

import sys

from loguru import logger

from placement_portal.core.config import Settings


def setup_logging(settings: Settings) -> None:
    """Replace loguru's default sink with the configured ones."""
    logger.remove()

    logger.add(
        sys.stderr,
        format="{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | {name} | <level>{message}</level>",
        level=settings.log_level,
        colorize=True,
    )

    if settings.log_file:
        # File sink captures everything (DEBUG level)
        logger.add(
            settings.log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {name} | {message}",
            level="DEBUG",
            rotation="10 MB",
        )

    logger.debug(f"Logging configured (level={settings.log_level}, file={settings.log_file})")
