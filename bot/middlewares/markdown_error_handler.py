"""
Markdown Error Handler Middleware.

Catches TelegramBadRequest errors caused by Markdown parsing and tells
the user instead of failing silently.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import Message, TelegramObject, Update
from loguru import logger


FORMATTING_ERROR = (
    "⚠️ A formatting error occurred. Please try again or contact support."
)


class MarkdownErrorHandlerMiddleware(BaseMiddleware):
    """Safety net for names that escape_md did not cover."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        """Process update with Markdown error handling."""
        try:
            return await handler(event, data)
        except TelegramBadRequest as e:
            if "can't parse entities" not in str(e):
                raise

            logger.warning(f"Markdown parse error caught by middleware: {e}")
            message = event.message if isinstance(event, Update) else event
            if isinstance(message, Message):
                try:
                    await message.answer(FORMATTING_ERROR, parse_mode=None)
                except TelegramBadRequest as send_error:
                    logger.warning(f"Failed to send formatting notice: {send_error}")
            return None
