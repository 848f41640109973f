"""
Model enumerations.

String-valued enums stored in VARCHAR columns.
"""

from enum import Enum


class AccountStatus(str, Enum):
    """Account lifecycle status."""

    PENDING = "pending"
    ACTIVE = "active"
    BLOCKED = "blocked"


class ReferralStatus(str, Enum):
    """Referral record status."""

    PENDING = "pending"
    CONVERTED = "converted"
    COMPLETED = "completed"


class WithdrawalStatus(str, Enum):
    """Withdrawal request status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PaymentMethod(str, Enum):
    """Withdrawal payout method."""

    TELEBIRR = "telebirr"
    BANK_TRANSFER = "bankTransfer"

    @classmethod
    def parse(cls, value: str) -> "PaymentMethod | None":
        """Resolve a method from its value, or None if unknown."""
        for method in cls:
            if method.value == value:
                return method
        return None
