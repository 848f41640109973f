"""Integration tests for registration payment approval by an admin."""

from decimal import Decimal

import pytest

from app.repositories.account_repository import AccountRepository
from app.services.referral import ReferralService
from app.services.notification.payloads import PaymentRejected
from app.utils.exceptions import AccountNotFound, AlreadyProcessed
from bot.handlers.admin.payments import (
    approve_registration_payment,
    reject_registration_payment,
)


class TestApproveRegistrationPayment:
    @pytest.mark.asyncio
    async def test_activates_and_credits_inviter(
        self, db_session, make_account, referral_config, mock_notifier
    ):
        await make_account(1001)
        await make_account(2002, status="pending", full_name="Sara Tesfaye")
        await ReferralService(db_session).register_referral("TST1001", 2002)

        text = await approve_registration_payment(
            db_session, 2002, referral_config, mock_notifier
        )

        assert "Sara Tesfaye" in text
        assert "commission credited" in text

        repo = AccountRepository(db_session)
        assert (await repo.get_by_id(2002, refresh=True)).is_active
        referrer = await repo.get_by_id(1001, refresh=True)
        assert referrer.balance == Decimal("30")
        assert referrer.paid_referrals == 1

    @pytest.mark.asyncio
    async def test_without_inviter(self, db_session, make_account, referral_config):
        await make_account(2002, status="pending")

        text = await approve_registration_payment(db_session, 2002, referral_config)

        assert "approved" in text
        assert "commission" not in text

    @pytest.mark.asyncio
    async def test_unknown_account(self, db_session, referral_config):
        with pytest.raises(AccountNotFound):
            await approve_registration_payment(db_session, 404, referral_config)

    @pytest.mark.asyncio
    async def test_blocked_account_not_reactivated(
        self, db_session, make_account, referral_config, mock_notifier
    ):
        await make_account(1001)
        await make_account(2002, status="blocked", referred_by_id=1001)

        with pytest.raises(AlreadyProcessed):
            await approve_registration_payment(
                db_session, 2002, referral_config, mock_notifier
            )

        repo = AccountRepository(db_session)
        assert (await repo.get_by_id(2002, refresh=True)).is_blocked
        assert (await repo.get_by_id(1001, refresh=True)).balance == Decimal("0")
        mock_notifier.notify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_second_approval(self, db_session, make_account, referral_config):
        await make_account(2002, status="pending")
        await approve_registration_payment(db_session, 2002, referral_config)

        with pytest.raises(AlreadyProcessed):
            await approve_registration_payment(db_session, 2002, referral_config)


class TestRejectRegistrationPayment:
    @pytest.mark.asyncio
    async def test_reason_reaches_student(
        self, db_session, make_account, mock_notifier
    ):
        await make_account(2002, status="pending")

        text = await reject_registration_payment(
            db_session, 2002, "  Amount does not match  ", mock_notifier
        )

        assert "rejected" in text
        assert "Amount does not match" in text
        mock_notifier.notify.assert_awaited_once_with(
            2002, PaymentRejected(user_id=2002, reason="Amount does not match")
        )
        account = await AccountRepository(db_session).get_by_id(2002, refresh=True)
        assert account.status == "pending"

    @pytest.mark.asyncio
    async def test_active_account(self, db_session, make_account, mock_notifier):
        await make_account(2002)

        with pytest.raises(AlreadyProcessed):
            await reject_registration_payment(
                db_session, 2002, "Wrong amount", mock_notifier
            )
