"""
Bot Messages Module
Contains all message templates and formatting functions for the bot
"""

from bot.messages.error_messages import (
    DATABASE_ERROR,
    GENERIC_ERROR,
    MAINTENANCE_MODE,
    TRY_AGAIN_LATER,
    error_text,
    format_error_for_admin,
)
from bot.messages.notifications import render_notification


__all__ = [
    "DATABASE_ERROR",
    "GENERIC_ERROR",
    "MAINTENANCE_MODE",
    "TRY_AGAIN_LATER",
    "error_text",
    "format_error_for_admin",
    "render_notification",
]
