"""
Bot Initialization - Logging Module.

Module: logging.py
Configures loguru logger for the bot.
Sets up log rotation and retention policies.
"""

import sys

from loguru import logger

from app.config.settings import settings


def setup_logging() -> None:
    """Configure stderr and rotating file sinks at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper())
    logger.add(
        "logs/bot.log",
        rotation="1 day",
        retention="7 days",
        level=settings.log_level.upper(),
        encoding="utf-8",
    )

    logger.info("Starting JU Tutor referral bot...")
