"""
Admin authentication middleware.

Guards admin routers: only configured admin Telegram IDs get through.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message, TelegramObject, User
from loguru import logger

from app.config.settings import settings
from bot.messages.admin_messages import ADMIN_ACCESS_DENIED


class AdminAuthMiddleware(BaseMiddleware):
    """
    Admin authentication middleware.

    Attach to message and callback_query observers of admin routers.
    """

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        """
        Let admins through, refuse everyone else.

        Args:
            handler: Next handler
            event: Telegram event
            data: Handler data

        Returns:
            Handler result
        """
        telegram_user: User | None = data.get("event_from_user")
        is_admin = data.get("is_admin")
        if is_admin is None and telegram_user is not None:
            is_admin = settings.is_admin(telegram_user.id)

        if is_admin:
            return await handler(event, data)

        user_id = telegram_user.id if telegram_user else None
        logger.warning(f"Non-admin {user_id} tried to use an admin action")

        if isinstance(event, CallbackQuery):
            await event.answer(ADMIN_ACCESS_DENIED, show_alert=True)
        elif isinstance(event, Message):
            await event.answer(ADMIN_ACCESS_DENIED)
        return None
