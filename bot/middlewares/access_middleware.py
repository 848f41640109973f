"""
Access gate middleware.

Stops updates while the bot is in maintenance mode and drops updates
from blocked accounts. Admins always pass.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message, TelegramObject, Update
from loguru import logger

from app.config.settings import settings
from bot.messages.user_messages import ACCOUNT_BLOCKED


class AccessMiddleware(BaseMiddleware):
    """Maintenance and blocked-account gate. Runs after AccountMiddleware."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        if data.get("is_admin", False):
            return await handler(event, data)

        if settings.maintenance_mode:
            await self._reply(event, settings.maintenance_message)
            return None

        account = data.get("account")
        if account is not None and account.is_blocked:
            logger.info(f"Dropped update from blocked account {account.id}")
            await self._reply(event, ACCOUNT_BLOCKED)
            return None

        return await handler(event, data)

    async def _reply(self, event: TelegramObject, text: str) -> None:
        if isinstance(event, Update):
            event = event.message or event.callback_query
        try:
            if isinstance(event, Message):
                await event.answer(text)
            elif isinstance(event, CallbackQuery):
                await event.answer(text[:200], show_alert=True)
        except Exception as e:
            logger.warning(f"Failed to send access notice: {e}")
