"""
Admin Withdrawals - Approval/Rejection Handler.

Approve debits the requester at once. Reject asks for a reason first.
Either way a request is resolved at most once; a second tap gets an
"already processed" alert.
"""

from typing import Any

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.withdrawal import WithdrawalApprovalService
from app.utils.exceptions import ReferralProgramError
from bot.keyboards import admin_cancel_keyboard
from bot.keyboards.buttons import CallbackPrefixes
from bot.messages.admin_messages import (
    OPERATION_CANCELLED,
    REJECTION_REASON_PROMPT,
    format_withdrawal_approved,
    format_withdrawal_rejected,
)
from bot.messages.error_messages import error_text
from bot.states.admin_states import AdminStates
from bot.utils.callback_parsers import parse_withdrawal_id


router = Router(name="admin_withdrawals_approval")

INVALID_REQUEST = "❌ Invalid withdrawal request."


@router.callback_query(F.data.startswith(CallbackPrefixes.APPROVE_WITHDRAWAL))
async def handle_approve_withdrawal(
    callback: CallbackQuery,
    session: AsyncSession,
    **data: Any,
) -> None:
    """Approve a pending withdrawal and debit the user."""
    withdrawal_id = parse_withdrawal_id(
        callback.data, CallbackPrefixes.APPROVE_WITHDRAWAL
    )
    if not withdrawal_id:
        await callback.answer(INVALID_REQUEST, show_alert=True)
        return

    approval_service = WithdrawalApprovalService(session, data.get("notifier"))
    try:
        request = await approval_service.approve_withdrawal(
            withdrawal_id, callback.from_user.id
        )
    except ReferralProgramError as e:
        logger.info(
            f"Admin {callback.from_user.id} could not approve "
            f"{withdrawal_id}: {type(e).__name__}"
        )
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer("✅ Approved")
    if callback.message:
        await callback.message.edit_reply_markup(reply_markup=None)
        await callback.message.answer(
            format_withdrawal_approved(request), parse_mode="Markdown"
        )


@router.callback_query(F.data.startswith(CallbackPrefixes.REJECT_WITHDRAWAL))
async def handle_reject_withdrawal(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    """Ask the admin for a rejection reason."""
    withdrawal_id = parse_withdrawal_id(
        callback.data, CallbackPrefixes.REJECT_WITHDRAWAL
    )
    if not withdrawal_id:
        await callback.answer(INVALID_REQUEST, show_alert=True)
        return

    await state.set_state(AdminStates.waiting_for_rejection_reason)
    await state.update_data(withdrawal_id=withdrawal_id)

    await callback.answer()
    if callback.message:
        await callback.message.answer(
            REJECTION_REASON_PROMPT.format(withdrawal_id=withdrawal_id),
            reply_markup=admin_cancel_keyboard(),
            parse_mode="Markdown",
        )


@router.message(AdminStates.waiting_for_rejection_reason, F.text)
async def handle_rejection_reason(
    message: Message,
    state: FSMContext,
    session: AsyncSession,
    **data: Any,
) -> None:
    """Reject with the reason the admin typed."""
    state_data = await state.get_data()
    withdrawal_id = state_data.get("withdrawal_id")
    await state.clear()

    if not withdrawal_id:
        await message.answer(INVALID_REQUEST)
        return

    approval_service = WithdrawalApprovalService(session, data.get("notifier"))
    try:
        request = await approval_service.reject_withdrawal(
            withdrawal_id, message.from_user.id, message.text
        )
    except ReferralProgramError as e:
        await message.answer(error_text(e))
        return

    await message.answer(
        format_withdrawal_rejected(request), parse_mode="Markdown"
    )


@router.callback_query(F.data == "admin_cancel")
async def handle_admin_cancel(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    await state.clear()
    await callback.answer()
    if callback.message:
        await callback.message.edit_text(OPERATION_CANCELLED)
