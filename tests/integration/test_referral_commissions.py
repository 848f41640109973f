"""
Integration tests for referral attribution and commission crediting.

Runs the services against an in-memory SQLite database.
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.models import PendingReferral, ReferralCommission
from app.models.enums import ReferralStatus
from app.repositories.account_repository import AccountRepository
from app.services.notification import CommissionCredited
from app.services.referral import ReferralCommissionEngine, ReferralService
from app.utils.exceptions import (
    AccountNotFound,
    DuplicateCommission,
    PersistenceFailure,
    ValidationError,
)


def _store_error() -> OperationalError:
    return OperationalError("UPDATE accounts", {}, Exception("database is locked"))


async def _commission_count(session) -> int:
    result = await session.execute(
        select(func.count()).select_from(ReferralCommission)
    )
    return result.scalar()


async def _fresh(session, account_id):
    return await AccountRepository(session).get_by_id(account_id, refresh=True)


class TestRegisterReferral:
    """Join-time attribution through a referral code."""

    @pytest.mark.asyncio
    async def test_records_pending_referral(self, db_session, make_account):
        await make_account(1001)
        await make_account(2002, status="pending")

        pending = await ReferralService(db_session).register_referral("tst1001", 2002)

        assert pending is not None
        assert pending.referrer_id == 1001
        assert pending.status == ReferralStatus.PENDING.value

        referrer = await _fresh(db_session, 1001)
        assert referrer.unpaid_referrals == 1
        assert referrer.total_referrals == 1
        assert referrer.paid_referrals == 0
        assert (await _fresh(db_session, 2002)).referred_by_id == 1001

    @pytest.mark.asyncio
    async def test_unknown_code_ignored(self, db_session, make_account):
        await make_account(2002)

        assert await ReferralService(db_session).register_referral("NOPE99", 2002) is None
        assert (await _fresh(db_session, 2002)).referred_by_id is None

    @pytest.mark.asyncio
    async def test_own_code_ignored(self, db_session, make_account):
        await make_account(1001)

        assert await ReferralService(db_session).register_referral("TST1001", 1001) is None
        assert (await _fresh(db_session, 1001)).total_referrals == 0

    @pytest.mark.asyncio
    async def test_second_code_ignored(self, db_session, make_account):
        await make_account(1001)
        await make_account(1003)
        await make_account(2002)
        service = ReferralService(db_session)

        await service.register_referral("TST1001", 2002)
        assert await service.register_referral("TST1003", 2002) is None

        assert (await _fresh(db_session, 2002)).referred_by_id == 1001
        assert (await _fresh(db_session, 1003)).total_referrals == 0

    @pytest.mark.asyncio
    async def test_unknown_joining_account(self, db_session, make_account):
        await make_account(1001)

        with pytest.raises(AccountNotFound):
            await ReferralService(db_session).register_referral("TST1001", 404)


class TestReferralCommissionEngine:
    """credit_referral_commission ledger behaviour."""

    @pytest.mark.asyncio
    async def test_credit_updates_ledger(
        self, db_session, make_account, referral_config, mock_notifier
    ):
        await make_account(1001, unpaid_referrals=1)
        await make_account(2002)

        commission = await ReferralCommissionEngine(
            db_session, mock_notifier
        ).credit_referral_commission(1001, 2002, referral_config)

        assert commission.id.startswith("REF_1001_2002_")
        assert commission.commission_amount == Decimal("30")
        assert commission.status == ReferralStatus.COMPLETED.value

        referrer = await _fresh(db_session, 1001)
        assert referrer.balance == Decimal("30")
        assert referrer.total_earned == Decimal("30")
        assert referrer.paid_referrals == 1
        assert referrer.unpaid_referrals == 0
        assert referrer.total_referrals == 1
        assert referrer.ledger_consistent

    @pytest.mark.asyncio
    async def test_referrer_notified(
        self, db_session, make_account, referral_config, mock_notifier
    ):
        await make_account(1001, balance=Decimal("30"), paid_referrals=1)
        await make_account(2002)

        await ReferralCommissionEngine(
            db_session, mock_notifier
        ).credit_referral_commission(1001, 2002, referral_config)

        recipient, payload = mock_notifier.notify.await_args.args
        assert recipient == 1001
        assert isinstance(payload, CommissionCredited)
        assert payload.new_balance == Decimal("60")
        assert payload.paid_referrals == 2
        assert payload.min_paid_referrals == 4

    @pytest.mark.asyncio
    async def test_second_credit_rejected(
        self, db_session, make_account, referral_config
    ):
        await make_account(1001)
        await make_account(2002)
        engine = ReferralCommissionEngine(db_session)

        await engine.credit_referral_commission(1001, 2002, referral_config)
        with pytest.raises(DuplicateCommission):
            await engine.credit_referral_commission(1001, 2002, referral_config)

        referrer = await _fresh(db_session, 1001)
        assert referrer.balance == Decimal("30")
        assert referrer.paid_referrals == 1
        assert await _commission_count(db_session) == 1

    @pytest.mark.asyncio
    async def test_self_referral_rejected(
        self, db_session, make_account, referral_config
    ):
        await make_account(1001)

        with pytest.raises(ValidationError):
            await ReferralCommissionEngine(db_session).credit_referral_commission(
                1001, 1001, referral_config
            )
        assert await _commission_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_missing_referrer(self, db_session, make_account, referral_config):
        await make_account(2002)

        with pytest.raises(AccountNotFound):
            await ReferralCommissionEngine(db_session).credit_referral_commission(
                404, 2002, referral_config
            )
        assert await _commission_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_credit_without_pending_referral(
        self, db_session, make_account, referral_config
    ):
        await make_account(1001)
        await make_account(2002)

        await ReferralCommissionEngine(db_session).credit_referral_commission(
            1001, 2002, referral_config
        )

        referrer = await _fresh(db_session, 1001)
        assert referrer.unpaid_referrals == 0
        assert referrer.total_referrals == 1

    @pytest.mark.asyncio
    async def test_commission_uses_configured_amount(
        self, db_session, make_account, referral_config
    ):
        await make_account(1001)
        await make_account(2002)
        config = referral_config.revise(commission_per_referral=Decimal("45"))

        commission = await ReferralCommissionEngine(
            db_session
        ).credit_referral_commission(1001, 2002, config)

        assert commission.commission_amount == Decimal("45")
        assert (await _fresh(db_session, 1001)).balance == Decimal("45")

    @pytest.mark.asyncio
    async def test_failed_credit_leaves_no_record(
        self, db_session, make_account, referral_config, mock_notifier
    ):
        await make_account(1001, unpaid_referrals=1)
        await make_account(2002)
        engine = ReferralCommissionEngine(db_session, mock_notifier)
        # Record is written, then the balance UPDATE fails
        engine.account_repo.apply_commission = AsyncMock(side_effect=_store_error())

        with pytest.raises(PersistenceFailure):
            await engine.credit_referral_commission(1001, 2002, referral_config)

        assert await _commission_count(db_session) == 0
        referrer = await _fresh(db_session, 1001)
        assert referrer.balance == Decimal("0")
        assert referrer.paid_referrals == 0
        assert referrer.unpaid_referrals == 1
        mock_notifier.notify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_pair_lookup(
        self, db_session, make_account, referral_config
    ):
        await make_account(1001)
        await make_account(2002)
        engine = ReferralCommissionEngine(db_session)
        engine.commission_repo.get_for_pair = AsyncMock(side_effect=_store_error())

        with pytest.raises(PersistenceFailure):
            await engine.credit_referral_commission(1001, 2002, referral_config)

        assert await _commission_count(db_session) == 0
        assert (await _fresh(db_session, 1001)).balance == Decimal("0")


class TestPaymentApprovedHook:
    """handle_referred_payment_approved end to end."""

    @pytest.mark.asyncio
    async def test_referral_converted(
        self, db_session, make_account, referral_config, mock_notifier
    ):
        await make_account(1001)
        await make_account(2002, status="pending")
        service = ReferralService(db_session, mock_notifier)
        pending = await service.register_referral("TST1001", 2002)

        commission = await service.handle_referred_payment_approved(2002, referral_config)

        assert commission is not None
        await db_session.refresh(pending)
        assert pending.status == ReferralStatus.CONVERTED.value
        assert pending.converted_at is not None

        referrer = await _fresh(db_session, 1001)
        assert referrer.paid_referrals == 1
        assert referrer.unpaid_referrals == 0
        assert referrer.total_referrals == 1
        assert referrer.balance == Decimal("30")
        mock_notifier.notify.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_repeat_approval_credits_once(
        self, db_session, make_account, referral_config
    ):
        await make_account(1001)
        await make_account(2002)
        service = ReferralService(db_session)
        await service.register_referral("TST1001", 2002)

        await service.handle_referred_payment_approved(2002, referral_config)
        assert await service.handle_referred_payment_approved(2002, referral_config) is None

        assert (await _fresh(db_session, 1001)).balance == Decimal("30")
        assert await _commission_count(db_session) == 1

    @pytest.mark.asyncio
    async def test_no_referrer(self, db_session, make_account, referral_config):
        await make_account(2002)

        result = await ReferralService(db_session).handle_referred_payment_approved(
            2002, referral_config
        )

        assert result is None
        assert await _commission_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_referrals_disabled(self, db_session, make_account, referral_config):
        await make_account(1001)
        await make_account(2002)
        service = ReferralService(db_session)
        await service.register_referral("TST1001", 2002)

        config = referral_config.revise(referrals_enabled=False)

        assert await service.handle_referred_payment_approved(2002, config) is None
        assert (await _fresh(db_session, 1001)).balance == Decimal("0")

    @pytest.mark.asyncio
    async def test_failed_lookup_does_not_raise(
        self, db_session, make_account, referral_config
    ):
        await make_account(1001)
        await make_account(2002)
        service = ReferralService(db_session)
        await service.register_referral("TST1001", 2002)
        service.account_repo.get_by_id = AsyncMock(side_effect=_store_error())

        assert await service.handle_referred_payment_approved(2002, referral_config) is None
        assert await _commission_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_failed_credit_does_not_raise(
        self, db_session, make_account, referral_config
    ):
        await make_account(1001)
        await make_account(2002)
        service = ReferralService(db_session)
        await service.register_referral("TST1001", 2002)
        service.engine.account_repo.apply_commission = AsyncMock(
            side_effect=_store_error()
        )

        assert await service.handle_referred_payment_approved(2002, referral_config) is None
        assert await _commission_count(db_session) == 0
        assert (await _fresh(db_session, 1001)).balance == Decimal("0")

    @pytest.mark.asyncio
    async def test_four_paid_referrals_unlock_withdrawal(
        self, db_session, make_account, referral_config
    ):
        await make_account(1001)
        service = ReferralService(db_session)
        for invitee in (2001, 2002, 2003, 2004):
            await make_account(invitee, status="pending")
            await service.register_referral("TST1001", invitee)

        summary = await service.get_referral_summary(1001, referral_config)
        assert summary.unpaid_referrals == 4
        assert summary.eligibility.eligible is False

        for invitee in (2001, 2002, 2003, 2004):
            await service.handle_referred_payment_approved(invitee, referral_config)

        summary = await service.get_referral_summary(1001, referral_config)
        assert summary.paid_referrals == 4
        assert summary.unpaid_referrals == 0
        assert summary.total_referrals == 4
        assert summary.balance == Decimal("120")
        assert summary.eligibility.eligible is True
        assert len(summary.commissions) == 4

        pending = await db_session.execute(
            select(func.count()).select_from(PendingReferral).where(
                PendingReferral.status == ReferralStatus.CONVERTED.value
            )
        )
        assert pending.scalar() == 4

    @pytest.mark.asyncio
    async def test_summary_for_unknown_account(self, db_session, referral_config):
        with pytest.raises(AccountNotFound):
            await ReferralService(db_session).get_referral_summary(404, referral_config)
