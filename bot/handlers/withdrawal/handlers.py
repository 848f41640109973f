"""
Main withdrawal handlers module.

Entry points of the withdrawal form: the Withdraw menu button, the
"Withdraw Earnings" inline button, method choice and cancel.
"""

from typing import Any

from aiogram import F, Router
from aiogram.filters import Command, StateFilter
from aiogram.types import CallbackQuery, InlineKeyboardMarkup, Message
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.account import Account
from app.models.enums import PaymentMethod
from app.services.referral.config import ReferralProgramConfig
from app.services.withdrawal import WithdrawalWorkflow
from app.utils.exceptions import AccountNotFound, NotEligible
from bot.keyboards import payment_method_keyboard, withdrawal_cancel_keyboard
from bot.keyboards.buttons import (
    CallbackPrefixes,
    MainMenuButtons,
    WithdrawalButtons,
)
from bot.messages.error_messages import error_text
from bot.messages.user_messages import (
    NO_WITHDRAWAL_IN_PROGRESS,
    REGISTER_FIRST,
    WITHDRAWAL_CANCELLED,
    format_amount_prompt,
    format_not_eligible,
    format_withdrawal_start,
)
from bot.states.withdrawal import WithdrawalStates


router = Router()

METHOD_LABELS = {
    PaymentMethod.TELEBIRR: WithdrawalButtons.TELEBIRR,
    PaymentMethod.BANK_TRANSFER: WithdrawalButtons.BANK_TRANSFER,
}


def build_workflow(session: AsyncSession, data: dict[str, Any]) -> WithdrawalWorkflow:
    """Workflow wired to the dispatcher's session store and notifier."""
    return WithdrawalWorkflow(
        session,
        store=data["withdrawal_store"],
        notifier=data.get("notifier"),
    )


async def _start_withdrawal(
    user_id: int,
    session: AsyncSession,
    data: dict[str, Any],
) -> tuple[str, InlineKeyboardMarkup | None]:
    account: Account | None = data.get("account")
    if not account:
        return REGISTER_FIRST, None

    config: ReferralProgramConfig = data["referral_config"]
    workflow = build_workflow(session, data)
    try:
        await workflow.begin_withdrawal(user_id, config)
    except NotEligible as e:
        return format_not_eligible(e, account, config), None
    except AccountNotFound:
        return REGISTER_FIRST, None

    text = format_withdrawal_start(account.balance, config.min_withdrawal_amount)
    return text, payment_method_keyboard()


@router.message(F.text == MainMenuButtons.WITHDRAWAL)
async def show_withdrawal_menu(
    message: Message,
    session: AsyncSession,
    **data: Any,
) -> None:
    """Start the withdrawal form from the main menu."""
    text, markup = await _start_withdrawal(message.from_user.id, session, data)
    await message.answer(text, reply_markup=markup, parse_mode="Markdown")


@router.callback_query(F.data == CallbackPrefixes.WITHDRAW_START)
async def handle_withdraw_earnings(
    callback: CallbackQuery,
    session: AsyncSession,
    **data: Any,
) -> None:
    """Start the withdrawal form from the referral dashboard."""
    text, markup = await _start_withdrawal(callback.from_user.id, session, data)
    await callback.answer()
    if callback.message:
        await callback.message.answer(
            text, reply_markup=markup, parse_mode="Markdown"
        )


@router.callback_query(F.data.startswith(CallbackPrefixes.WITHDRAW_METHOD))
async def handle_method_selection(
    callback: CallbackQuery,
    session: AsyncSession,
    **data: Any,
) -> None:
    """Telebirr or CBE chosen."""
    method_value = callback.data[len(CallbackPrefixes.WITHDRAW_METHOD):]
    workflow = build_workflow(session, data)
    result = await workflow.select_method(callback.from_user.id, method_value)

    if not result.accepted:
        text = error_text(result.error) if result.error else NO_WITHDRAWAL_IN_PROGRESS
        await callback.answer(text, show_alert=True)
        return

    await callback.answer()

    account: Account | None = data.get("account")
    config: ReferralProgramConfig = data["referral_config"]
    method = PaymentMethod(method_value)
    prompt = format_amount_prompt(
        METHOD_LABELS[method],
        account.balance if account else 0,
        config.min_withdrawal_amount,
    )
    if callback.message:
        await callback.message.edit_text(
            prompt,
            reply_markup=withdrawal_cancel_keyboard(),
            parse_mode="Markdown",
        )


@router.callback_query(F.data == CallbackPrefixes.WITHDRAW_CANCEL)
async def handle_cancel_callback(
    callback: CallbackQuery,
    session: AsyncSession,
    **data: Any,
) -> None:
    workflow = build_workflow(session, data)
    result = await workflow.cancel_withdrawal(callback.from_user.id)

    await callback.answer()
    text = WITHDRAWAL_CANCELLED if result.accepted else NO_WITHDRAWAL_IN_PROGRESS
    if callback.message:
        await callback.message.edit_text(text)


@router.message(Command("cancel"), StateFilter(WithdrawalStates))
async def handle_cancel_command(
    message: Message,
    session: AsyncSession,
    **data: Any,
) -> None:
    """/cancel typed while the withdrawal form is open."""
    workflow = build_workflow(session, data)
    result = await workflow.cancel_withdrawal(message.from_user.id)
    await message.answer(
        WITHDRAWAL_CANCELLED if result.accepted else NO_WITHDRAWAL_IN_PROGRESS
    )
