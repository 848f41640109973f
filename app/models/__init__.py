"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.account import Account
from app.models.base import Base
from app.models.enums import (
    AccountStatus,
    PaymentMethod,
    ReferralStatus,
    WithdrawalStatus,
)
from app.models.pending_referral import PendingReferral
from app.models.referral_commission import ReferralCommission
from app.models.withdrawal_request import WithdrawalRequest


__all__ = [
    "Base",
    # Ledger Models
    "Account",
    "ReferralCommission",
    "PendingReferral",
    "WithdrawalRequest",
    # Enums
    "AccountStatus",
    "PaymentMethod",
    "ReferralStatus",
    "WithdrawalStatus",
]
