"""
Account middleware.

Loads the sender's Account and exposes the admin flag and the current
referral program terms to handlers.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, User
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.repositories.account_repository import AccountRepository


class AccountMiddleware(BaseMiddleware):
    """
    Populate handler data.

    Sets:
        account: Account or None when the user has not registered
        is_admin: Sender is a configured admin
        referral_config: ReferralProgramConfig snapshot
    """

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        telegram_user: User | None = data.get("event_from_user")
        session: AsyncSession | None = data.get("session")

        data["referral_config"] = settings.referral_program()
        data["is_admin"] = bool(
            telegram_user and settings.is_admin(telegram_user.id)
        )

        account = None
        if telegram_user and session is not None:
            account = await AccountRepository(session).get_by_id(
                telegram_user.id
            )
        data["account"] = account

        return await handler(event, data)
