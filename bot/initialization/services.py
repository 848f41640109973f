"""
Bot Initialization - Services Module.

Module: services.py
Validates environment variables and wires the objects handlers receive
through dispatcher workflow data.
"""

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.base import BaseStorage
from loguru import logger

from app.config.settings import settings
from app.services.notification import TelegramNotificationDispatcher
from bot.messages.notifications import render_notification
from bot.storage import FsmWithdrawalSessionStore


def validate_environment() -> None:
    """Log settings that would make the referral flow misbehave."""
    if "your_" in settings.database_url.lower():
        logger.error("DATABASE_URL is not properly configured")
    if not settings.get_admin_ids():
        logger.warning(
            "ADMIN_TELEGRAM_IDS is empty: withdrawal requests will reach nobody"
        )
    if not settings.withdrawals_enabled:
        logger.warning("Withdrawals are disabled by configuration")
    if not settings.referrals_enabled:
        logger.warning("Referral commissions are disabled by configuration")

    config = settings.referral_program()
    logger.info(
        f"Referral program v{config.version}: "
        f"{config.commission_per_referral} ETB per paid referral, "
        f"{config.min_paid_referrals} paid referrals and "
        f"{config.min_withdrawal_amount} ETB minimum to withdraw"
    )


def register_workflow_data(
    dp: Dispatcher, bot: Bot, storage: BaseStorage
) -> None:
    """
    Expose the notifier and withdrawal session store to handlers.

    Args:
        dp: Dispatcher instance
        bot: Connected bot (its id keys the session store)
        storage: FSM storage shared with FSMContext
    """
    dp["notifier"] = TelegramNotificationDispatcher(
        bot, settings.get_admin_ids(), render_notification
    )
    dp["withdrawal_store"] = FsmWithdrawalSessionStore(storage, bot.id)
    logger.info("Notification dispatcher and withdrawal store registered")
