"""
Tests for withdrawal session storage.

Sessions live in aiogram FSM storage keyed by the user's private chat.
"""

from decimal import Decimal

import pytest
from aiogram.fsm.storage.base import StorageKey

from app.models.enums import PaymentMethod
from app.services.withdrawal.session import (
    CollectingAccountName,
    CollectingAmount,
    CollectingPhone,
    SelectingMethod,
    session_from_data,
    session_to_data,
)
from bot.states import AdminStates, WithdrawalStates


class TestSessionData:
    def test_amount_kept_as_decimal_string(self):
        data = session_to_data(
            CollectingPhone(method=PaymentMethod.TELEBIRR, amount=Decimal("100"))
        )

        assert data == {
            "step": "collecting_phone",
            "method": "telebirr",
            "amount": "100",
        }

    def test_bank_name_step_restored(self):
        session = CollectingAccountName(
            amount=Decimal("75"), account_number="1000123456"
        )

        assert session_from_data(session_to_data(session)) == session

    @pytest.mark.parametrize(
        "data",
        [
            None,
            {},
            {"step": "unknown"},
            {"step": "collecting_amount"},
            {"step": "collecting_phone", "method": "telebirr", "amount": "x"},
        ],
    )
    def test_unreadable_data_is_no_session(self, data):
        assert session_from_data(data) is None


class TestFsmWithdrawalSessionStore:
    @pytest.mark.asyncio
    async def test_empty_store(self, session_store):
        assert await session_store.get(1001) is None

    @pytest.mark.asyncio
    async def test_save_sets_matching_fsm_state(self, session_store, fsm_storage):
        await session_store.save(1001, CollectingAmount(method=PaymentMethod.BANK_TRANSFER))

        key = StorageKey(bot_id=session_store.bot_id, chat_id=1001, user_id=1001)
        assert await fsm_storage.get_state(key) == WithdrawalStates.waiting_for_amount.state
        assert await session_store.get(1001) == CollectingAmount(
            method=PaymentMethod.BANK_TRANSFER
        )

    @pytest.mark.asyncio
    async def test_users_are_isolated(self, session_store):
        await session_store.save(1001, SelectingMethod())

        assert await session_store.get(1002) is None

    @pytest.mark.asyncio
    async def test_clear_drops_session(self, session_store):
        await session_store.save(1001, SelectingMethod())

        await session_store.clear(1001)

        assert await session_store.get(1001) is None

    @pytest.mark.asyncio
    async def test_clear_leaves_other_conversations(self, session_store, fsm_storage):
        key = StorageKey(bot_id=session_store.bot_id, chat_id=1001, user_id=1001)
        await fsm_storage.set_state(key, AdminStates.waiting_for_rejection_reason)
        await fsm_storage.set_data(key, {"withdrawal_id": "WD_1_2"})

        await session_store.clear(1001)

        assert await fsm_storage.get_state(key) == (
            AdminStates.waiting_for_rejection_reason.state
        )
        assert await fsm_storage.get_data(key) == {"withdrawal_id": "WD_1_2"}
        assert await session_store.get(1001) is None
