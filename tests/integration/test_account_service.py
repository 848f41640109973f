"""Integration tests for AccountService."""

import re
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from app.models.enums import AccountStatus
from app.services import account_service as account_service_module
from app.services.account_service import AccountService
from app.services.notification.payloads import PaymentRejected
from app.utils.exceptions import (
    AccountNotFound,
    AlreadyProcessed,
    DuplicateRecord,
)


class TestCreateAccount:
    @pytest.mark.asyncio
    async def test_new_account_starts_empty(self, db_session):
        account = await AccountService(db_session).create_account(
            1001, full_name="Abebe Kebede", username="abebe"
        )

        assert account.status == AccountStatus.PENDING.value
        assert re.match(r"^ABE\d{3}$", account.referral_code)
        assert account.balance == Decimal("0")
        assert account.total_earned == Decimal("0")
        assert account.total_withdrawn == Decimal("0")
        assert account.paid_referrals == 0
        assert account.unpaid_referrals == 0
        assert account.total_referrals == 0
        assert account.referred_by_id is None

    @pytest.mark.asyncio
    async def test_duplicate_account(self, db_session, make_account):
        await make_account(1001)

        with pytest.raises(DuplicateRecord):
            await AccountService(db_session).create_account(1001, full_name="Abebe")

    @pytest.mark.asyncio
    async def test_code_collision_falls_back_to_id(
        self, db_session, make_account, monkeypatch
    ):
        await make_account(1001, referral_code="ABE123")
        monkeypatch.setattr(
            account_service_module, "generate_referral_code", lambda name: "ABE123"
        )

        account = await AccountService(db_session).create_account(2002, full_name="Abebe")

        assert account.referral_code == "JUT2002"


    @pytest.mark.asyncio
    async def test_code_taken_between_check_and_insert(
        self, db_session, make_account, monkeypatch
    ):
        await make_account(1001, referral_code="ABE123")
        monkeypatch.setattr(
            account_service_module, "generate_referral_code", lambda name: "ABE123"
        )
        service = AccountService(db_session)
        # Availability check misses the other registration's code
        monkeypatch.setattr(
            service.account_repo,
            "get_by_referral_code",
            AsyncMock(return_value=None),
        )

        account = await service.create_account(2002, full_name="Abebe")

        assert account.id == 2002
        assert account.referral_code == "JUT2002"
        assert account.status == AccountStatus.PENDING.value


class TestApprovePayment:
    @pytest.mark.asyncio
    async def test_pending_becomes_active(self, db_session, make_account):
        await make_account(1001, status=AccountStatus.PENDING.value)

        account = await AccountService(db_session).approve_payment(1001)

        assert account.is_active
        assert account.activated_at is not None

    @pytest.mark.asyncio
    async def test_already_active(self, db_session, make_account):
        await make_account(1001)

        with pytest.raises(AlreadyProcessed):
            await AccountService(db_session).approve_payment(1001)

    @pytest.mark.asyncio
    async def test_blocked_stays_blocked(self, db_session, make_account):
        await make_account(1001, status=AccountStatus.BLOCKED.value)
        service = AccountService(db_session)

        with pytest.raises(AlreadyProcessed):
            await service.approve_payment(1001)

        account = await service.account_repo.get_by_id(1001, refresh=True)
        assert account.is_blocked
        assert account.activated_at is None

    @pytest.mark.asyncio
    async def test_unknown(self, db_session):
        with pytest.raises(AccountNotFound):
            await AccountService(db_session).approve_payment(404)


class TestRejectPayment:
    @pytest.mark.asyncio
    async def test_student_told_why(self, db_session, make_account, mock_notifier):
        await make_account(1001, status=AccountStatus.PENDING.value)

        account = await AccountService(db_session, mock_notifier).reject_payment(
            1001, "Receipt is unreadable"
        )

        assert account.status == AccountStatus.PENDING.value
        mock_notifier.notify.assert_awaited_once_with(
            1001, PaymentRejected(user_id=1001, reason="Receipt is unreadable")
        )

    @pytest.mark.asyncio
    async def test_blank_reason(self, db_session, make_account, mock_notifier):
        await make_account(1001, status=AccountStatus.PENDING.value)

        await AccountService(db_session, mock_notifier).reject_payment(1001, "   ")

        payload = mock_notifier.notify.await_args.args[1]
        assert payload.reason == "No reason given"

    @pytest.mark.asyncio
    async def test_active_account(self, db_session, make_account, mock_notifier):
        await make_account(1001)

        with pytest.raises(AlreadyProcessed):
            await AccountService(db_session, mock_notifier).reject_payment(
                1001, "Wrong amount"
            )

        mock_notifier.notify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown(self, db_session, mock_notifier):
        with pytest.raises(AccountNotFound):
            await AccountService(db_session, mock_notifier).reject_payment(
                404, "Wrong amount"
            )


class TestAccountStatus:
    @pytest.mark.asyncio
    async def test_block(self, db_session, make_account):
        await make_account(1001)

        account = await AccountService(db_session).block_account(1001)

        assert account.is_blocked

    @pytest.mark.asyncio
    async def test_unblock_restores_active(self, db_session, make_account):
        await make_account(1001, status=AccountStatus.PENDING.value)
        service = AccountService(db_session)
        await service.approve_payment(1001)
        await service.block_account(1001)

        account = await service.unblock_account(1001)

        assert account.is_active

    @pytest.mark.asyncio
    async def test_unblock_unpaid_goes_back_to_pending(
        self, db_session, make_account
    ):
        await make_account(1001, status=AccountStatus.PENDING.value)
        service = AccountService(db_session)
        await service.block_account(1001)

        account = await service.unblock_account(1001)

        assert account.status == AccountStatus.PENDING.value

    @pytest.mark.asyncio
    async def test_unblock_not_blocked(self, db_session, make_account):
        await make_account(1001)

        account = await AccountService(db_session).unblock_account(1001)

        assert account.is_active

    @pytest.mark.asyncio
    async def test_block_unknown(self, db_session):
        with pytest.raises(AccountNotFound):
            await AccountService(db_session).block_account(404)

    @pytest.mark.asyncio
    async def test_pending_payment_accounts(self, db_session, make_account):
        await make_account(1001, status=AccountStatus.PENDING.value)
        await make_account(1002)
        await make_account(1003, status=AccountStatus.PENDING.value)

        pending = await AccountService(db_session).get_pending_payment_accounts()

        assert {account.id for account in pending} == {1001, 1003}
