"""
Database middleware.

Opens one AsyncSession per update, commits after the handler returns and
rolls back on failure. Services that need finer control commit themselves.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message, TelegramObject, Update
from loguru import logger
from sqlalchemy.exc import (
    DatabaseError,
    InterfaceError,
    OperationalError,
)
from sqlalchemy.ext.asyncio import async_sessionmaker

from bot.messages.error_messages import DATABASE_ERROR


class DatabaseMiddleware(BaseMiddleware):
    """Database middleware - provides a live session to handlers."""

    def __init__(self, session_pool: async_sessionmaker) -> None:
        """
        Initialize database middleware.

        Args:
            session_pool: SQLAlchemy async session maker
        """
        super().__init__()
        self.session_pool = session_pool

    async def _send_database_error_message(self, event: TelegramObject) -> None:
        if isinstance(event, Update):
            event = event.message or event.callback_query
        try:
            if isinstance(event, Message):
                await event.answer(DATABASE_ERROR)
            elif isinstance(event, CallbackQuery):
                await event.answer(DATABASE_ERROR[:200], show_alert=True)
        except Exception as e:
            logger.warning(f"Failed to send database error message: {e}")

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        """
        Run the handler inside a session.

        Args:
            handler: Next handler
            event: Telegram event
            data: Handler data

        Returns:
            Handler result, or None after a database failure
        """
        async with self.session_pool() as session:
            data["session"] = session
            try:
                result = await handler(event, data)
                await session.commit()
                return result
            except (OperationalError, InterfaceError, DatabaseError) as e:
                await session.rollback()
                logger.error(
                    f"Database error in handler: {e}",
                    extra={"error_type": type(e).__name__},
                )
                await self._send_database_error_message(event)
                return None
            except Exception:
                await session.rollback()
                raise
