"""
User-facing keyboards.

Main menu reply keyboard and the inline keyboards of the referral and
withdrawal flows.
"""

from aiogram.types import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
)
from aiogram.utils.keyboard import InlineKeyboardBuilder, ReplyKeyboardBuilder

from app.models.enums import PaymentMethod
from bot.keyboards.buttons import (
    CallbackPrefixes,
    MainMenuButtons,
    ReferralButtons,
    WithdrawalButtons,
)


def main_menu_reply_keyboard() -> ReplyKeyboardMarkup:
    """
    Main menu keyboard.

    Returns:
        ReplyKeyboardMarkup with referral and balance actions
    """
    builder = ReplyKeyboardBuilder()

    builder.row(
        KeyboardButton(text=MainMenuButtons.REFERRALS),
        KeyboardButton(text=MainMenuButtons.BALANCE),
    )
    builder.row(
        KeyboardButton(text=MainMenuButtons.WITHDRAWAL),
    )

    return builder.as_markup(resize_keyboard=True)


def referral_keyboard() -> InlineKeyboardMarkup:
    """Inline actions under the referral summary."""
    builder = InlineKeyboardBuilder()

    builder.row(
        InlineKeyboardButton(
            text=ReferralButtons.WITHDRAW_EARNINGS,
            callback_data=CallbackPrefixes.WITHDRAW_START,
        )
    )

    return builder.as_markup()


def payment_method_keyboard() -> InlineKeyboardMarkup:
    """
    Withdrawal method choice.

    Returns:
        InlineKeyboardMarkup with Telebirr / CBE and cancel
    """
    builder = InlineKeyboardBuilder()

    builder.row(
        InlineKeyboardButton(
            text=WithdrawalButtons.TELEBIRR,
            callback_data=(
                f"{CallbackPrefixes.WITHDRAW_METHOD}"
                f"{PaymentMethod.TELEBIRR.value}"
            ),
        ),
        InlineKeyboardButton(
            text=WithdrawalButtons.BANK_TRANSFER,
            callback_data=(
                f"{CallbackPrefixes.WITHDRAW_METHOD}"
                f"{PaymentMethod.BANK_TRANSFER.value}"
            ),
        ),
    )
    builder.row(
        InlineKeyboardButton(
            text=WithdrawalButtons.CANCEL_WITHDRAWAL,
            callback_data=CallbackPrefixes.WITHDRAW_CANCEL,
        )
    )

    return builder.as_markup()


def withdrawal_cancel_keyboard() -> InlineKeyboardMarkup:
    """Single cancel button shown under every withdrawal prompt."""
    builder = InlineKeyboardBuilder()

    builder.row(
        InlineKeyboardButton(
            text=WithdrawalButtons.CANCEL_WITHDRAWAL,
            callback_data=CallbackPrefixes.WITHDRAW_CANCEL,
        )
    )

    return builder.as_markup()
