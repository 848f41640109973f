"""
Referral services package.

Contains modular services for referral processing:
- config: Immutable referral program terms
- eligibility: Withdrawal eligibility policy
- commission_engine: Credits converted referrals
- referral_service: Join-time attribution and summaries
"""

from app.services.referral.commission_engine import ReferralCommissionEngine
from app.services.referral.config import ReferralProgramConfig
from app.services.referral.eligibility import (
    EligibilityResult,
    can_withdraw,
    ensure_can_withdraw,
    missing_referrals,
)
from app.services.referral.referral_service import (
    ReferralService,
    ReferralSummary,
)

__all__ = [
    "ReferralProgramConfig",
    "EligibilityResult",
    "can_withdraw",
    "ensure_can_withdraw",
    "missing_referrals",
    "ReferralCommissionEngine",
    "ReferralService",
    "ReferralSummary",
]
