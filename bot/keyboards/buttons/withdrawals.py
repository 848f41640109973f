"""Withdrawal-related button constants."""


class WithdrawalButtons:
    """Withdrawal-related buttons."""

    # User withdrawal
    TELEBIRR = "📱 Telebirr"
    BANK_TRANSFER = "🏦 CBE"
    CANCEL_WITHDRAWAL = "❌ Cancel withdrawal"

    # Admin withdrawal
    PENDING_WITHDRAWALS = "⏳ Pending withdrawals"
    APPROVE = "✅ Approve"
    REJECT = "❌ Reject"
