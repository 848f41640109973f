"""
Bot Initialization - Handlers Module.

Module: handlers.py
Registers all bot handlers (user and admin).
Handler order matters for proper routing.
"""

from aiogram import Dispatcher
from loguru import logger

from bot.middlewares.admin_auth_middleware import AdminAuthMiddleware


def register_user_handlers(dp: Dispatcher) -> None:
    """Register all user handlers."""
    from bot.handlers import referral, start, withdrawal

    # /start first so it works in any state
    dp.include_router(start.router)

    # Menu buttons BEFORE withdrawal state handlers, so pressing
    # Balance mid-form is not read as an amount
    dp.include_router(referral.router)
    dp.include_router(withdrawal.router)

    logger.info("User handlers registered successfully")


def register_admin_handlers(dp: Dispatcher) -> None:
    """Register all admin handlers with authentication middleware."""
    from bot.handlers.admin import panel, payments, students, withdrawals

    admin_auth_middleware = AdminAuthMiddleware()
    _apply_admin_auth(
        admin_auth_middleware, [panel, payments, students, withdrawals]
    )

    dp.include_router(panel.router)
    dp.include_router(withdrawals.router)
    dp.include_router(payments.router)
    dp.include_router(students.router)

    logger.info("Admin handlers registered successfully")


def _apply_admin_auth(middleware, routers) -> None:
    """Apply admin auth middleware to a list of routers."""
    for router in routers:
        router.router.message.middleware(middleware)
        router.router.callback_query.middleware(middleware)


def register_all_handlers(dp: Dispatcher) -> None:
    """Register all handlers in the correct order."""
    register_user_handlers(dp)
    register_admin_handlers(dp)
