"""Referral system button constants."""


class ReferralButtons:
    """Referral system buttons."""

    WITHDRAW_EARNINGS = "💸 Withdraw Earnings"
