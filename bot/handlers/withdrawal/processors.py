"""
Withdrawal processing module.

Text input for the steps of the withdrawal form: amount, Telebirr phone,
CBE account number and holder name. Each input gets exactly one reply.
"""

from typing import Any

from aiogram import F, Router
from aiogram.filters import StateFilter
from aiogram.types import Message
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.withdrawal import StepResult, WorkflowStep
from app.utils.exceptions import (
    AccountNotFound,
    InsufficientBalance,
    PersistenceFailure,
)
from bot.keyboards import main_menu_reply_keyboard, withdrawal_cancel_keyboard
from bot.messages.error_messages import error_text
from bot.messages.user_messages import (
    BANK_ACCOUNT_PROMPT,
    BANK_NAME_PROMPT,
    NO_WITHDRAWAL_IN_PROGRESS,
    REGISTER_FIRST,
    TELEBIRR_PHONE_PROMPT,
    format_withdrawal_submitted,
)
from bot.states.withdrawal import WithdrawalStates

from .handlers import build_workflow


router = Router()

NEXT_PROMPTS = {
    WorkflowStep.COLLECTING_PHONE: TELEBIRR_PHONE_PROMPT,
    WorkflowStep.COLLECTING_ACCOUNT_NUMBER: BANK_ACCOUNT_PROMPT,
    WorkflowStep.COLLECTING_ACCOUNT_NAME: BANK_NAME_PROMPT,
}


async def _reply_with_result(message: Message, result: StepResult) -> None:
    if result.step == WorkflowStep.SUBMITTED and result.request is not None:
        await message.answer(
            format_withdrawal_submitted(result.request),
            reply_markup=main_menu_reply_keyboard(),
            parse_mode="Markdown",
        )
        return

    if not result.accepted:
        if result.error is not None:
            await message.answer(
                f"{error_text(result.error)}\nPlease try again:",
                reply_markup=withdrawal_cancel_keyboard(),
            )
        else:
            await message.answer(NO_WITHDRAWAL_IN_PROGRESS)
        return

    await message.answer(
        NEXT_PROMPTS[result.step],
        reply_markup=withdrawal_cancel_keyboard(),
    )


@router.message(WithdrawalStates.waiting_for_amount, F.text)
async def process_withdrawal_amount(
    message: Message,
    session: AsyncSession,
    **data: Any,
) -> None:
    """Amount typed after the method was chosen."""
    workflow = build_workflow(session, data)
    try:
        result = await workflow.submit_amount(
            message.from_user.id, message.text, data["referral_config"]
        )
    except InsufficientBalance as e:
        await message.answer(
            error_text(e), reply_markup=withdrawal_cancel_keyboard()
        )
        return
    except AccountNotFound:
        await message.answer(REGISTER_FIRST)
        return

    await _reply_with_result(message, result)


@router.message(
    F.text,
    StateFilter(
        WithdrawalStates.waiting_for_phone,
        WithdrawalStates.waiting_for_account_number,
        WithdrawalStates.waiting_for_account_name,
    ),
)
async def process_payment_detail(
    message: Message,
    session: AsyncSession,
    **data: Any,
) -> None:
    """Phone number, account number or holder name."""
    workflow = build_workflow(session, data)
    try:
        result = await workflow.submit_method_detail(
            message.from_user.id, message.text, data["referral_config"]
        )
    except PersistenceFailure as e:
        logger.warning(
            f"Withdrawal of user {message.from_user.id} not stored, "
            f"form kept for a retry"
        )
        await message.answer(
            error_text(e), reply_markup=withdrawal_cancel_keyboard()
        )
        return
    except AccountNotFound:
        await message.answer(REGISTER_FIRST)
        return

    await _reply_with_result(message, result)
