"""
Withdrawal eligibility policy.

Pure checks of an account against the referral program thresholds.
"""

from dataclasses import dataclass

from app.models.account import Account
from app.services.referral.config import ReferralProgramConfig
from app.utils.exceptions import IneligibilityReason, NotEligible


@dataclass(frozen=True)
class EligibilityResult:
    """Outcome of a withdrawal eligibility check."""

    eligible: bool
    missing_referrals: int
    reason: IneligibilityReason | None = None


def missing_referrals(account: Account, config: ReferralProgramConfig) -> int:
    """Paid referrals still needed before a withdrawal is allowed."""
    return max(0, config.min_paid_referrals - account.paid_referrals)


def can_withdraw(
    account: Account, config: ReferralProgramConfig
) -> EligibilityResult:
    """
    Check whether an account may request a withdrawal.

    Eligible iff paid_referrals >= min_paid_referrals and
    balance >= min_withdrawal_amount. The referral shortfall is reported
    before the balance shortfall.

    Args:
        account: Account to check
        config: Referral program terms

    Returns:
        EligibilityResult with the failing constraint, if any
    """
    missing = missing_referrals(account, config)

    if not config.withdrawals_enabled:
        return EligibilityResult(
            False, missing, IneligibilityReason.WITHDRAWALS_DISABLED
        )
    if missing > 0:
        return EligibilityResult(
            False, missing, IneligibilityReason.NOT_ENOUGH_REFERRALS
        )
    if account.balance < config.min_withdrawal_amount:
        return EligibilityResult(
            False, missing, IneligibilityReason.INSUFFICIENT_BALANCE
        )
    return EligibilityResult(True, missing)


def ensure_can_withdraw(
    account: Account, config: ReferralProgramConfig
) -> EligibilityResult:
    """
    Same as can_withdraw, raising on failure.

    Raises:
        NotEligible: With the failing reason and missing referrals
    """
    result = can_withdraw(account, config)
    if not result.eligible:
        raise NotEligible(result.reason, result.missing_referrals)
    return result
