"""
Admin keyboards.

Inline actions for withdrawal review and payment approval.
"""

from aiogram.types import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
)
from aiogram.utils.keyboard import InlineKeyboardBuilder, ReplyKeyboardBuilder

from bot.keyboards.buttons import AdminButtons, CallbackPrefixes, WithdrawalButtons


def withdrawal_review_keyboard(withdrawal_id: str) -> InlineKeyboardMarkup:
    """
    Approve / reject buttons for one pending withdrawal.

    Args:
        withdrawal_id: Withdrawal request ID

    Returns:
        InlineKeyboardMarkup with approve and reject
    """
    builder = InlineKeyboardBuilder()

    builder.row(
        InlineKeyboardButton(
            text=WithdrawalButtons.APPROVE,
            callback_data=f"{CallbackPrefixes.APPROVE_WITHDRAWAL}{withdrawal_id}",
        ),
        InlineKeyboardButton(
            text=WithdrawalButtons.REJECT,
            callback_data=f"{CallbackPrefixes.REJECT_WITHDRAWAL}{withdrawal_id}",
        ),
    )

    return builder.as_markup()


def payment_approval_keyboard(user_id: int) -> InlineKeyboardMarkup:
    """Approve / reject / block buttons for a user's registration payment."""
    builder = InlineKeyboardBuilder()

    builder.row(
        InlineKeyboardButton(
            text=WithdrawalButtons.APPROVE,
            callback_data=f"{CallbackPrefixes.APPROVE_PAYMENT}{user_id}",
        ),
        InlineKeyboardButton(
            text=WithdrawalButtons.REJECT,
            callback_data=f"{CallbackPrefixes.REJECT_PAYMENT}{user_id}",
        ),
    )
    builder.row(
        InlineKeyboardButton(
            text=AdminButtons.BLOCK_USER,
            callback_data=f"{CallbackPrefixes.BLOCK_USER}{user_id}",
        )
    )

    return builder.as_markup()


def admin_cancel_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text=AdminButtons.CANCEL, callback_data="admin_cancel")
    )
    return builder.as_markup()


def admin_menu_reply_keyboard() -> ReplyKeyboardMarkup:
    """Admin panel keyboard."""
    builder = ReplyKeyboardBuilder()

    builder.row(
        KeyboardButton(text=AdminButtons.WITHDRAWAL_REQUESTS),
        KeyboardButton(text=AdminButtons.PENDING_PAYMENTS),
    )

    return builder.as_markup(resize_keyboard=True)
