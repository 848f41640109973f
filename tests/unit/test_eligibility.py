"""
Tests for withdrawal eligibility.

A withdrawal needs both enough paid referrals and enough balance.

Covers:
- Fresh account
- Referral threshold met but balance empty
- Both thresholds met
- Withdrawals switched off
"""

from decimal import Decimal

import pytest

from app.services.referral import (
    ReferralProgramConfig,
    can_withdraw,
    ensure_can_withdraw,
    missing_referrals,
)
from app.utils.exceptions import IneligibilityReason, NotEligible


class TestCanWithdraw:
    """can_withdraw against the default program terms."""

    def test_fresh_account_needs_four_referrals(self, account_factory, referral_config):
        result = can_withdraw(account_factory(), referral_config)

        assert result.eligible is False
        assert result.missing_referrals == 4
        assert result.reason == IneligibilityReason.NOT_ENOUGH_REFERRALS

    def test_enough_referrals_but_no_balance(self, account_factory, referral_config):
        account = account_factory(paid_referrals=4, balance=Decimal("0"))

        result = can_withdraw(account, referral_config)

        assert result.eligible is False
        assert result.missing_referrals == 0
        assert result.reason == IneligibilityReason.INSUFFICIENT_BALANCE

    def test_referral_shortfall_reported_before_balance(
        self, account_factory, referral_config
    ):
        account = account_factory(paid_referrals=1, balance=Decimal("0"))

        result = can_withdraw(account, referral_config)

        assert result.reason == IneligibilityReason.NOT_ENOUGH_REFERRALS
        assert result.missing_referrals == 3

    def test_eligible_at_exact_thresholds(self, account_factory, referral_config):
        account = account_factory(paid_referrals=4, balance=Decimal("50"))

        result = can_withdraw(account, referral_config)

        assert result.eligible is True
        assert result.reason is None

    def test_more_referrals_than_needed(self, account_factory, referral_config):
        account = account_factory(paid_referrals=9, balance=Decimal("270"))

        assert missing_referrals(account, referral_config) == 0
        assert can_withdraw(account, referral_config).eligible is True

    def test_withdrawals_disabled(self, account_factory):
        config = ReferralProgramConfig(withdrawals_enabled=False)
        account = account_factory(paid_referrals=4, balance=Decimal("300"))

        result = can_withdraw(account, config)

        assert result.eligible is False
        assert result.reason == IneligibilityReason.WITHDRAWALS_DISABLED

    def test_custom_thresholds(self, account_factory):
        config = ReferralProgramConfig(
            min_paid_referrals=2, min_withdrawal_amount=Decimal("100")
        )
        account = account_factory(paid_referrals=2, balance=Decimal("99"))

        result = can_withdraw(account, config)

        assert result.reason == IneligibilityReason.INSUFFICIENT_BALANCE


class TestEnsureCanWithdraw:
    """ensure_can_withdraw raises NotEligible with the failing reason."""

    def test_raises_with_missing_referrals(self, account_factory, referral_config):
        with pytest.raises(NotEligible) as exc_info:
            ensure_can_withdraw(account_factory(paid_referrals=3), referral_config)

        assert exc_info.value.reason == IneligibilityReason.NOT_ENOUGH_REFERRALS
        assert exc_info.value.missing_referrals == 1

    def test_returns_result_when_eligible(self, account_factory, referral_config):
        account = account_factory(paid_referrals=4, balance=Decimal("120"))

        assert ensure_can_withdraw(account, referral_config).eligible is True


class TestReferralProgramConfig:
    """Program terms validation."""

    def test_defaults(self):
        config = ReferralProgramConfig()

        assert config.commission_per_referral == Decimal("30")
        assert config.min_paid_referrals == 4
        assert config.min_withdrawal_amount == Decimal("50")

    def test_rejects_non_positive_commission(self):
        with pytest.raises(ValueError):
            ReferralProgramConfig(commission_per_referral=Decimal("0"))

    def test_rejects_negative_referral_threshold(self):
        with pytest.raises(ValueError):
            ReferralProgramConfig(min_paid_referrals=-1)

    def test_revise_bumps_version(self):
        config = ReferralProgramConfig(version=3)

        revised = config.revise(commission_per_referral=Decimal("40"))

        assert revised.version == 4
        assert revised.commission_per_referral == Decimal("40")
        assert config.commission_per_referral == Decimal("30")
