"""
Start handler.

Handles /start: creates the account on first contact and attributes it
to the owner of the referral code in the invite link.
"""

from typing import Any

from aiogram import Router
from aiogram.filters import CommandObject, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.models.account import Account
from app.services.account_service import AccountService
from app.services.referral import ReferralService
from app.utils.exceptions import DuplicateRecord
from bot.keyboards import main_menu_reply_keyboard
from bot.messages.user_messages import format_welcome, generate_referral_link
from bot.utils.callback_parsers import parse_start_referral_code


router = Router(name="start")


@router.message(CommandStart())
async def cmd_start(
    message: Message,
    state: FSMContext,
    command: CommandObject,
    session: AsyncSession,
    **data: Any,
) -> None:
    """
    Handle /start with an optional referral payload.

    Returning users just get the menu again; a referral code is only
    honoured for the account's first /start.
    """
    await state.clear()

    telegram_user = message.from_user
    if telegram_user is None:
        return

    account: Account | None = data.get("account")
    referred = False

    if account is None:
        account_service = AccountService(session)
        try:
            account = await account_service.create_account(
                telegram_user.id,
                full_name=telegram_user.full_name,
                username=telegram_user.username,
            )
        except DuplicateRecord:
            # Double /start racing itself
            account = await account_service.get_account(telegram_user.id)
            if account is None:
                raise

        referral_code = parse_start_referral_code(command.args)
        if referral_code:
            referral_service = ReferralService(session, data.get("notifier"))
            pending = await referral_service.register_referral(
                referral_code, telegram_user.id
            )
            referred = pending is not None
            logger.info(
                f"User {telegram_user.id} joined with code {referral_code!r}, "
                f"attributed={referred}"
            )
    elif command.args:
        logger.debug(
            f"Ignored start payload {command.args!r} from existing "
            f"account {telegram_user.id}"
        )

    link = generate_referral_link(settings.bot_username, account.referral_code)
    await message.answer(
        format_welcome(account.full_name, link, referred),
        reply_markup=main_menu_reply_keyboard(),
        parse_mode="Markdown",
        disable_web_page_preview=True,
    )
