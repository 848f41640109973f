"""
Admin Students Handler.

Blocking and unblocking students. Blocked students get a notice on
every update and nothing else (see AccessMiddleware).
"""

from typing import Any

from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import CallbackQuery, Message
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.account_service import AccountService
from app.utils.exceptions import ReferralProgramError
from bot.keyboards.buttons import CallbackPrefixes
from bot.messages.admin_messages import INVALID_ACCOUNT, format_status_changed
from bot.messages.error_messages import error_text
from bot.utils.callback_parsers import parse_callback_id, parse_telegram_id


router = Router(name="admin_students")

BLOCK_USAGE = "Usage: /block <telegram_id>"
UNBLOCK_USAGE = "Usage: /unblock <telegram_id>"


@router.message(Command("block"))
async def handle_block_command(
    message: Message,
    command: CommandObject,
    session: AsyncSession,
    **data: Any,
) -> None:
    """/block <telegram_id>"""
    user_id = parse_telegram_id(command.args)
    if user_id is None:
        await message.answer(BLOCK_USAGE)
        return

    try:
        account = await AccountService(session).block_account(user_id)
    except ReferralProgramError as e:
        await message.answer(error_text(e))
        return

    logger.info(f"Admin {message.from_user.id} blocked {user_id}")
    await message.answer(format_status_changed(account), parse_mode="Markdown")


@router.message(Command("unblock"))
async def handle_unblock_command(
    message: Message,
    command: CommandObject,
    session: AsyncSession,
    **data: Any,
) -> None:
    """/unblock <telegram_id>"""
    user_id = parse_telegram_id(command.args)
    if user_id is None:
        await message.answer(UNBLOCK_USAGE)
        return

    try:
        account = await AccountService(session).unblock_account(user_id)
    except ReferralProgramError as e:
        await message.answer(error_text(e))
        return

    logger.info(f"Admin {message.from_user.id} unblocked {user_id}")
    await message.answer(format_status_changed(account), parse_mode="Markdown")


@router.callback_query(F.data.startswith(CallbackPrefixes.BLOCK_USER))
async def handle_block_callback(
    callback: CallbackQuery,
    session: AsyncSession,
    **data: Any,
) -> None:
    user_id = parse_callback_id(callback.data, CallbackPrefixes.BLOCK_USER)
    if user_id is None:
        await callback.answer(INVALID_ACCOUNT, show_alert=True)
        return

    try:
        account = await AccountService(session).block_account(user_id)
    except ReferralProgramError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    logger.info(f"Admin {callback.from_user.id} blocked {user_id}")
    await callback.answer("🚫 Blocked")
    if callback.message:
        await callback.message.edit_reply_markup(reply_markup=None)
        await callback.message.answer(
            format_status_changed(account), parse_mode="Markdown"
        )
