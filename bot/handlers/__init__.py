"""
Handlers.

Bot command and message handlers.
"""

from bot.handlers import referral, start, withdrawal

__all__ = [
    "referral",
    "start",
    "withdrawal",
]
