"""
Notification payloads.

Structured events handed to the dispatcher; text is rendered elsewhere.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class CommissionCredited:
    """Referrer earned a commission for a paid referral."""

    referrer_id: int
    referred_user_id: int
    commission_id: str
    amount: Decimal
    new_balance: Decimal
    paid_referrals: int
    min_paid_referrals: int


@dataclass(frozen=True)
class WithdrawalRequested:
    """New withdrawal request awaiting admin review."""

    withdrawal_id: str
    user_id: int
    username: str | None
    full_name: str | None
    amount: Decimal
    payment_method: str
    payment_details: dict[str, Any] = field(default_factory=dict)
    paid_referrals: int = 0
    min_paid_referrals: int = 0
    balance: Decimal = Decimal("0")


@dataclass(frozen=True)
class WithdrawalApproved:
    """Admin approved a withdrawal."""

    withdrawal_id: str
    user_id: int
    amount: Decimal
    new_balance: Decimal


@dataclass(frozen=True)
class WithdrawalRejected:
    """Admin rejected a withdrawal."""

    withdrawal_id: str
    user_id: int
    amount: Decimal
    reason: str


@dataclass(frozen=True)
class PaymentRejected:
    """Admin rejected a registration payment; the account stays pending."""

    user_id: int
    reason: str


NotificationPayload = (
    CommissionCredited
    | WithdrawalRequested
    | WithdrawalApproved
    | WithdrawalRejected
    | PaymentRejected
)
