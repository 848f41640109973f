"""Admin panel button constants."""


class AdminButtons:
    """Admin panel main buttons."""

    WITHDRAWAL_REQUESTS = "💸 Withdrawal requests"
    PENDING_PAYMENTS = "🧾 Pending payments"
    CANCEL = "❌ Cancel"

    # Student management
    BLOCK_USER = "🚫 Block"
