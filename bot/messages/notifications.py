"""
Notification rendering.

Turns structured notification payloads into Telegram message text and
an optional inline keyboard. Used as the renderer of the notification
dispatcher.
"""

from typing import Any

from app.services.notification.payloads import (
    CommissionCredited,
    NotificationPayload,
    PaymentRejected,
    WithdrawalApproved,
    WithdrawalRejected,
    WithdrawalRequested,
)
from app.utils.formatters import escape_md, format_etb
from bot.keyboards.admin_keyboards import withdrawal_review_keyboard
from bot.messages.admin_messages import format_withdrawal_request


def render_notification(payload: NotificationPayload) -> tuple[str, Any]:
    """
    Render a payload.

    Args:
        payload: Structured notification

    Returns:
        Tuple of (Markdown text, reply markup or None)

    Raises:
        TypeError: Unknown payload type
    """
    if isinstance(payload, CommissionCredited):
        remaining = max(0, payload.min_paid_referrals - payload.paid_referrals)
        text = (
            f"🎉 *REFERRAL COMMISSION EARNED!*\n\n"
            f"A friend you invited completed their payment.\n"
            f"💵 Commission: *{format_etb(payload.amount)}*\n"
            f"💰 New Balance: {format_etb(payload.new_balance)}\n"
            f"📊 Paid Referrals: {payload.paid_referrals}/"
            f"{payload.min_paid_referrals}"
        )
        if remaining:
            text += f"\n\n{remaining} more paid referrals to unlock withdrawals."
        return text, None

    if isinstance(payload, WithdrawalRequested):
        text = format_withdrawal_request(
            withdrawal_id=payload.withdrawal_id,
            full_name=payload.full_name,
            username=payload.username,
            amount=payload.amount,
            method=payload.payment_method,
            details=payload.payment_details,
            paid_referrals=payload.paid_referrals,
            min_paid_referrals=payload.min_paid_referrals,
            balance=payload.balance,
        )
        return (
            f"{text}\n\n*Quick Actions:*",
            withdrawal_review_keyboard(payload.withdrawal_id),
        )

    if isinstance(payload, WithdrawalApproved):
        return (
            f"🎉 *WITHDRAWAL APPROVED!*\n\n"
            f"Your withdrawal request has been approved!\n"
            f"Amount: *{format_etb(payload.amount)}*\n\n"
            f"The funds will be transferred to your account within 24-48 hours.\n\n"
            f"💰 New Balance: {format_etb(payload.new_balance)}",
            None,
        )

    if isinstance(payload, WithdrawalRejected):
        return (
            f"❌ *WITHDRAWAL REJECTED*\n\n"
            f"Your withdrawal request of *{format_etb(payload.amount)}* "
            f"was rejected.\n"
            f"Reason: {escape_md(payload.reason)}\n\n"
            f"Your balance was not changed.",
            None,
        )

    if isinstance(payload, PaymentRejected):
        return (
            f"❌ *PAYMENT NOT APPROVED*\n\n"
            f"We could not verify your registration payment.\n"
            f"Reason: {escape_md(payload.reason)}\n\n"
            f"Please send a new payment screenshot or contact support.",
            None,
        )

    raise TypeError(f"Unknown notification payload: {type(payload).__name__}")
