"""
Global Error Handler Middleware.

Catches unhandled exceptions and notifies admins.
Sends friendly message to users - never shows technical details.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware, Bot
from aiogram.types import CallbackQuery, Message, TelegramObject, Update, User
from loguru import logger

from app.config.settings import settings
from app.utils.exceptions import is_safe_to_ignore, is_user_facing
from bot.messages.error_messages import (
    GENERIC_ERROR,
    error_text,
    format_error_for_admin,
)


class ErrorHandlerMiddleware(BaseMiddleware):
    """
    Global error handler middleware.

    - Logs the exception
    - Sends a friendly message to the user
    - Notifies the first admin with technical details
    """

    def _get_user(self, event: TelegramObject) -> User | None:
        """Extract user from event."""
        if isinstance(event, Update):
            if event.message:
                return event.message.from_user
            if event.callback_query:
                return event.callback_query.from_user
        elif isinstance(event, (Message, CallbackQuery)):
            return event.from_user
        return None

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        """Execute middleware."""
        try:
            return await handler(event, data)
        except Exception as e:
            bot: Bot | None = data.get("bot")
            user = self._get_user(event)

            if is_safe_to_ignore(e):
                logger.warning(f"Telegram API error ignored: {e}")
                return None

            if is_user_facing(e):
                # Typed failure a handler did not catch: tell the user, no admin alert
                logger.warning(f"Unhandled {type(e).__name__}: {e}")
                if bot and user:
                    try:
                        await bot.send_message(chat_id=user.id, text=error_text(e))
                    except Exception as user_notify_error:
                        logger.warning(f"Failed to notify user: {user_notify_error}")
                return None

            logger.exception(f"Unhandled exception: {e}")

            if bot and user:
                try:
                    await bot.send_message(chat_id=user.id, text=GENERIC_ERROR)
                except Exception as user_notify_error:
                    logger.warning(f"Failed to notify user: {user_notify_error}")

            admin_ids = settings.get_admin_ids()
            if bot and admin_ids:
                try:
                    handler_name = getattr(handler, "__name__", None)
                    text = format_error_for_admin(
                        e, user.id if user else 0, context=handler_name
                    )
                    # First admin only, to avoid spam
                    await bot.send_message(chat_id=admin_ids[0], text=text)
                except Exception as notify_error:
                    logger.error(f"Failed to notify admin: {notify_error}")

            return None
