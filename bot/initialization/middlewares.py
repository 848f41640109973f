"""
Bot Initialization - Middlewares Module.

Module: middlewares.py
Registers all bot middlewares in the correct order.
Order is critical for proper request processing.
"""

from aiogram import Dispatcher
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bot.middlewares.access_middleware import AccessMiddleware
from bot.middlewares.account_middleware import AccountMiddleware
from bot.middlewares.database import DatabaseMiddleware
from bot.middlewares.error_handler import ErrorHandlerMiddleware
from bot.middlewares.markdown_error_handler import MarkdownErrorHandlerMiddleware


def register_middlewares(
    dp: Dispatcher, session_pool: async_sessionmaker[AsyncSession]
) -> None:
    """
    Register all middlewares.

    Middleware order is critical:
    1. Error handler
    2. Markdown error handler
    3. Database (session per update)
    4. Account (needs session)
    5. Access gate (needs account and admin flag)

    Args:
        dp: Dispatcher instance
        session_pool: Session factory for DatabaseMiddleware
    """
    dp.update.middleware(ErrorHandlerMiddleware())
    dp.update.middleware(MarkdownErrorHandlerMiddleware())
    dp.update.middleware(DatabaseMiddleware(session_pool=session_pool))
    dp.update.middleware(AccountMiddleware())
    dp.update.middleware(AccessMiddleware())

    logger.info("Middlewares registered successfully")
