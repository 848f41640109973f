"""
Referral Handler.

Referral dashboard and balance for students.
"""

from typing import Any

from aiogram import F, Router
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.models.account import Account
from app.services.referral import ReferralService
from bot.keyboards import referral_keyboard
from bot.keyboards.buttons import MainMenuButtons
from bot.messages.user_messages import (
    REGISTER_FIRST,
    format_balance,
    format_referral_summary,
    generate_referral_link,
)


router = Router(name="referral")


@router.message(F.text == MainMenuButtons.REFERRALS)
async def show_referrals(
    message: Message,
    session: AsyncSession,
    **data: Any,
) -> None:
    """Show referral code, link, counters and earnings."""
    account: Account | None = data.get("account")
    if not account:
        await message.answer(REGISTER_FIRST)
        return

    referral_service = ReferralService(session)
    summary = await referral_service.get_referral_summary(
        account.id, data["referral_config"]
    )
    link = generate_referral_link(settings.bot_username, summary.referral_code)

    await message.answer(
        format_referral_summary(summary, link),
        reply_markup=referral_keyboard(),
        parse_mode="Markdown",
        disable_web_page_preview=True,
    )


@router.message(F.text == MainMenuButtons.BALANCE)
async def show_balance(
    message: Message,
    session: AsyncSession,
    **data: Any,
) -> None:
    account: Account | None = data.get("account")
    if not account:
        await message.answer(REGISTER_FIRST)
        return

    referral_service = ReferralService(session)
    summary = await referral_service.get_referral_summary(
        account.id, data["referral_config"]
    )
    await message.answer(format_balance(summary), parse_mode="Markdown")
