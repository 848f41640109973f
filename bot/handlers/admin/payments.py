"""
Admin Payments Handler.

Registration payment review. Approving activates a pending account and,
if the user was invited, credits the inviter's commission. Rejecting
asks for a reason, tells the student and leaves the account pending.
"""

from typing import Any

from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.account_service import AccountService
from app.services.referral import ReferralService
from app.services.referral.config import ReferralProgramConfig
from app.utils.exceptions import ReferralProgramError
from bot.keyboards import admin_cancel_keyboard, payment_approval_keyboard
from bot.keyboards.buttons import AdminButtons, CallbackPrefixes
from bot.messages.admin_messages import (
    INVALID_ACCOUNT,
    NO_PENDING_PAYMENTS,
    PAYMENT_REJECTION_REASON_PROMPT,
    format_payment_approved,
    format_payment_rejected,
    format_pending_payment,
)
from bot.messages.error_messages import error_text
from bot.states.admin_states import AdminStates
from bot.utils.callback_parsers import parse_callback_id, parse_telegram_id


router = Router(name="admin_payments")

PENDING_PAYMENTS_LIMIT = 10

APPROVE_PAYMENT_USAGE = "Usage: /approve_payment <telegram_id>"
REJECT_PAYMENT_USAGE = "Usage: /reject_payment <telegram_id> <reason>"


async def approve_registration_payment(
    session: AsyncSession,
    user_id: int,
    config: ReferralProgramConfig,
    notifier: Any = None,
) -> str:
    """
    Activate a pending account and run the referral commission hook.

    Args:
        session: Database session
        user_id: Account whose payment was verified
        config: Referral program terms
        notifier: Notification dispatcher for the inviter

    Returns:
        Reply text for the admin

    Raises:
        ReferralProgramError: Account missing, not pending, or store failure
    """
    account = await AccountService(session).approve_payment(user_id)
    full_name = account.full_name
    commission = await ReferralService(
        session, notifier
    ).handle_referred_payment_approved(user_id, config)

    logger.info(
        f"Registration payment of {user_id} approved, "
        f"commission={'credited' if commission else 'none'}"
    )
    return format_payment_approved(full_name, user_id, commission is not None)


async def reject_registration_payment(
    session: AsyncSession,
    user_id: int,
    reason: str,
    notifier: Any = None,
) -> str:
    """
    Reject a pending payment and notify the student.

    Returns:
        Reply text for the admin

    Raises:
        ReferralProgramError: Account missing or not pending
    """
    reason = (reason or "").strip() or "No reason given"
    account = await AccountService(session, notifier).reject_payment(
        user_id, reason
    )
    return format_payment_rejected(account, reason)


@router.message(Command("payments"))
@router.message(F.text == AdminButtons.PENDING_PAYMENTS)
async def handle_pending_payments(
    message: Message,
    session: AsyncSession,
    **data: Any,
) -> None:
    """List accounts waiting for payment approval."""
    accounts = await AccountService(session).get_pending_payment_accounts(
        limit=PENDING_PAYMENTS_LIMIT
    )
    if not accounts:
        await message.answer(NO_PENDING_PAYMENTS)
        return

    for account in accounts:
        await message.answer(
            format_pending_payment(account),
            reply_markup=payment_approval_keyboard(account.id),
            parse_mode="Markdown",
        )


@router.callback_query(F.data.startswith(CallbackPrefixes.APPROVE_PAYMENT))
async def handle_approve_payment_callback(
    callback: CallbackQuery,
    session: AsyncSession,
    **data: Any,
) -> None:
    user_id = parse_callback_id(callback.data, CallbackPrefixes.APPROVE_PAYMENT)
    if user_id is None:
        await callback.answer(INVALID_ACCOUNT, show_alert=True)
        return

    try:
        text = await approve_registration_payment(
            session, user_id, data["referral_config"], data.get("notifier")
        )
    except ReferralProgramError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer("✅ Approved")
    if callback.message:
        await callback.message.edit_reply_markup(reply_markup=None)
        await callback.message.answer(text, parse_mode="Markdown")


@router.message(Command("approve_payment"))
async def handle_approve_payment_command(
    message: Message,
    command: CommandObject,
    session: AsyncSession,
    **data: Any,
) -> None:
    """/approve_payment <telegram_id>"""
    user_id = parse_telegram_id(command.args)
    if user_id is None:
        await message.answer(APPROVE_PAYMENT_USAGE)
        return

    try:
        text = await approve_registration_payment(
            session, user_id, data["referral_config"], data.get("notifier")
        )
    except ReferralProgramError as e:
        await message.answer(error_text(e))
        return

    await message.answer(text, parse_mode="Markdown")


@router.callback_query(F.data.startswith(CallbackPrefixes.REJECT_PAYMENT))
async def handle_reject_payment_callback(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    """Ask the admin why the payment is rejected."""
    user_id = parse_callback_id(callback.data, CallbackPrefixes.REJECT_PAYMENT)
    if user_id is None:
        await callback.answer(INVALID_ACCOUNT, show_alert=True)
        return

    await state.set_state(AdminStates.waiting_for_payment_rejection_reason)
    await state.update_data(payment_user_id=user_id)

    await callback.answer()
    if callback.message:
        await callback.message.answer(
            PAYMENT_REJECTION_REASON_PROMPT.format(user_id=user_id),
            reply_markup=admin_cancel_keyboard(),
            parse_mode="Markdown",
        )


@router.message(AdminStates.waiting_for_payment_rejection_reason, F.text)
async def handle_payment_rejection_reason(
    message: Message,
    state: FSMContext,
    session: AsyncSession,
    **data: Any,
) -> None:
    """Reject with the reason the admin typed."""
    state_data = await state.get_data()
    user_id = state_data.get("payment_user_id")
    await state.clear()

    if user_id is None:
        await message.answer(INVALID_ACCOUNT)
        return

    try:
        text = await reject_registration_payment(
            session, user_id, message.text, data.get("notifier")
        )
    except ReferralProgramError as e:
        await message.answer(error_text(e))
        return

    await message.answer(text, parse_mode="Markdown")


@router.message(Command("reject_payment"))
async def handle_reject_payment_command(
    message: Message,
    command: CommandObject,
    session: AsyncSession,
    **data: Any,
) -> None:
    """/reject_payment <telegram_id> <reason>"""
    user_arg, _, reason = (command.args or "").strip().partition(" ")
    user_id = parse_telegram_id(user_arg)
    if user_id is None:
        await message.answer(REJECT_PAYMENT_USAGE)
        return

    try:
        text = await reject_registration_payment(
            session, user_id, reason, data.get("notifier")
        )
    except ReferralProgramError as e:
        await message.answer(error_text(e))
        return

    await message.answer(text, parse_mode="Markdown")
