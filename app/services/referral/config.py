"""
Referral program configuration.

Immutable snapshot of the program terms passed into every core call.
"""

from dataclasses import dataclass, replace
from decimal import Decimal

from app.config.business_constants import (
    DEFAULT_COMMISSION_PER_REFERRAL,
    DEFAULT_MIN_PAID_REFERRALS,
    DEFAULT_MIN_WITHDRAWAL_AMOUNT,
)


@dataclass(frozen=True)
class ReferralProgramConfig:
    """
    Referral program terms.

    Attributes:
        version: Terms version, bumped when any value changes
        commission_per_referral: Fixed credit per converted referral (ETB)
        min_paid_referrals: Paid referrals needed before withdrawing
        min_withdrawal_amount: Floor on a requested amount (ETB)
        withdrawals_enabled: Feature toggle for new withdrawal requests
        referrals_enabled: Feature toggle for commission crediting
    """

    version: int = 1
    commission_per_referral: Decimal = DEFAULT_COMMISSION_PER_REFERRAL
    min_paid_referrals: int = DEFAULT_MIN_PAID_REFERRALS
    min_withdrawal_amount: Decimal = DEFAULT_MIN_WITHDRAWAL_AMOUNT
    withdrawals_enabled: bool = True
    referrals_enabled: bool = True

    def __post_init__(self) -> None:
        if self.commission_per_referral <= 0:
            raise ValueError("commission_per_referral must be positive")
        if self.min_withdrawal_amount <= 0:
            raise ValueError("min_withdrawal_amount must be positive")
        if self.min_paid_referrals < 0:
            raise ValueError("min_paid_referrals cannot be negative")

    def revise(self, **changes: object) -> "ReferralProgramConfig":
        """Return a copy with the given changes and the next version number."""
        return replace(self, version=self.version + 1, **changes)
