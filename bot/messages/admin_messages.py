"""
Admin Message Templates.

Texts for withdrawal review, registration payment review and
student blocking.
"""

from decimal import Decimal
from typing import Any

from app.models.account import Account
from app.models.enums import AccountStatus, PaymentMethod
from app.models.withdrawal_request import WithdrawalRequest
from app.utils.formatters import escape_md, format_etb


ADMIN_ACCESS_DENIED = "🔒 This action is available to administrators only."

ADMIN_PANEL = (
    "🛠 *Admin panel*\n\n"
    "Choose an action, or use a command:\n"
    "/approve\\_payment <id>, /reject\\_payment <id> <reason>\n"
    "/block <id>, /unblock <id>"
)

NO_PENDING_WITHDRAWALS = "✅ No pending withdrawals."

NO_PENDING_PAYMENTS = "✅ No accounts awaiting payment approval."

REJECTION_REASON_PROMPT = (
    "✍️ Send the rejection reason for withdrawal `{withdrawal_id}`:"
)

OPERATION_CANCELLED = "❌ Operation cancelled."

PAYMENT_REJECTION_REASON_PROMPT = (
    "✍️ Send the reason for rejecting the payment of `{user_id}`.\n"
    "The student will see it."
)

INVALID_ACCOUNT = "❌ Invalid account."


def format_payment_details(method: str, details: dict[str, Any]) -> str:
    """
    One-line payout destination.

    Args:
        method: telebirr or bankTransfer
        details: Stored payment details

    Returns:
        Text like "📱 Telebirr: 251912345678"
    """
    if method == PaymentMethod.TELEBIRR.value:
        return f"📱 Telebirr: {escape_md(details.get('phone'))}"
    return (
        f"🏦 CBE: {escape_md(details.get('account_number'))} "
        f"({escape_md(details.get('account_name'))})"
    )


def format_withdrawal_request(
    withdrawal_id: str,
    full_name: str | None,
    username: str | None,
    amount: Decimal,
    method: str,
    details: dict[str, Any],
    paid_referrals: int,
    min_paid_referrals: int,
    balance: Decimal,
    title: str = "💸 *NEW WITHDRAWAL REQUEST!*",
) -> str:
    """Full context an admin needs to pay out a withdrawal."""
    return (
        f"{title}\n\n"
        f"👤 *User:* {escape_md(full_name) or 'Unknown'} "
        f"(@{escape_md(username) or 'N/A'})\n"
        f"💵 Amount: {format_etb(amount)}\n"
        f"💳 Method: {escape_md(method)}\n"
        f"{format_payment_details(method, details)}\n"
        f"📊 Paid Referrals: {paid_referrals}/{min_paid_referrals}\n"
        f"💰 Current Balance: {format_etb(balance)}\n"
        f"🆔 Withdrawal ID: `{withdrawal_id}`"
    )


def format_pending_withdrawal(
    request: WithdrawalRequest,
    account: Account | None,
    min_paid_referrals: int,
) -> str:
    return format_withdrawal_request(
        withdrawal_id=request.id,
        full_name=account.full_name if account else None,
        username=account.username if account else None,
        amount=request.amount,
        method=request.payment_method,
        details=request.payment_details,
        paid_referrals=account.paid_referrals if account else 0,
        min_paid_referrals=min_paid_referrals,
        balance=account.balance if account else Decimal("0"),
        title="💸 *Pending Withdrawal*",
    )


def format_pending_header(count: int) -> str:
    return (
        f"💸 *Pending Withdrawals ({count})*\n\n"
        f"Select a withdrawal to process:"
    )


def format_withdrawal_approved(request: WithdrawalRequest) -> str:
    return f"✅ Withdrawal `{request.id}` approved successfully!"


def format_withdrawal_rejected(request: WithdrawalRequest) -> str:
    return (
        f"❌ Withdrawal `{request.id}` rejected.\n"
        f"Reason: {escape_md(request.rejection_reason)}"
    )


def format_pending_payment(account: Account) -> str:
    return (
        f"🧾 *Awaiting payment approval*\n\n"
        f"👤 {escape_md(account.full_name) or 'Unknown'} "
        f"(@{escape_md(account.username) or 'N/A'})\n"
        f"🆔 Telegram ID: `{account.id}`"
    )


def format_payment_approved(
    full_name: str | None, account_id: int, commission_credited: bool
) -> str:
    text = (
        f"✅ Payment of {escape_md(full_name) or account_id} approved. "
        f"Account is now active."
    )
    if commission_credited:
        text += "\n🎁 Referral commission credited to the inviter."
    return text


def format_payment_rejected(account: Account, reason: str) -> str:
    return (
        f"❌ Payment of {escape_md(account.full_name) or account.id} rejected.\n"
        f"Reason: {escape_md(reason)}\n"
        f"The account stays pending until a new payment is approved."
    )


def format_status_changed(account: Account) -> str:
    labels = {
        AccountStatus.ACTIVE.value: "✅ active",
        AccountStatus.PENDING.value: "⏳ awaiting payment approval",
        AccountStatus.BLOCKED.value: "🚫 blocked",
    }
    return (
        f"👤 {escape_md(account.full_name) or 'Unknown'} (`{account.id}`) "
        f"is now {labels.get(account.status, account.status)}."
    )
