"""
Tests for notification rendering and delivery.

Delivery failures must never propagate to the caller.
"""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.exceptions import TelegramBadRequest, TelegramForbiddenError
from aiogram.methods import SendMessage

from app.services.notification import (
    CommissionCredited,
    PaymentRejected,
    TelegramNotificationDispatcher,
    WithdrawalApproved,
    WithdrawalRejected,
    WithdrawalRequested,
)
from app.utils.exceptions import (
    AlreadyProcessed,
    InsufficientBalance,
    InvalidPhoneNumber,
    PersistenceFailure,
    ReferralProgramError,
)
from app.utils.formatters import escape_md, format_etb
from bot.messages.error_messages import GENERIC_ERROR, TRY_AGAIN_LATER, error_text
from bot.messages.notifications import render_notification


def _payload() -> WithdrawalApproved:
    return WithdrawalApproved(
        withdrawal_id="WD_1001_1", user_id=1001,
        amount=Decimal("100"), new_balance=Decimal("200"),
    )


def _send_message_method() -> SendMessage:
    return SendMessage(chat_id=1001, text="x")


class TestRenderNotification:
    def test_commission_shows_remaining_referrals(self):
        text, markup = render_notification(
            CommissionCredited(
                referrer_id=1001, referred_user_id=2002, commission_id="REF_1",
                amount=Decimal("30"), new_balance=Decimal("60"),
                paid_referrals=2, min_paid_referrals=4,
            )
        )

        assert "30 ETB" in text
        assert "2/4" in text
        assert "2 more paid referrals" in text
        assert markup is None

    def test_withdrawal_request_has_review_keyboard(self):
        text, markup = render_notification(
            WithdrawalRequested(
                withdrawal_id="WD_1001_1", user_id=1001, username="abebe",
                full_name="Abebe", amount=Decimal("100"), payment_method="telebirr",
                payment_details={"phone_number": "251911223344"},
                paid_referrals=4, min_paid_referrals=4, balance=Decimal("300"),
            )
        )

        assert "100 ETB" in text
        assert markup is not None
        callbacks = [
            button.callback_data
            for row in markup.inline_keyboard
            for button in row
        ]
        assert any("WD_1001_1" in data for data in callbacks)

    def test_rejection_reason_escaped(self):
        text, _ = render_notification(
            WithdrawalRejected(
                withdrawal_id="WD_1001_1", user_id=1001,
                amount=Decimal("100"), reason="wrong_number",
            )
        )

        assert "wrong\\_number" in text

    def test_payment_rejection_reason(self):
        text, markup = render_notification(
            PaymentRejected(user_id=2002, reason="blurry_screenshot")
        )

        assert "PAYMENT NOT APPROVED" in text
        assert "blurry\\_screenshot" in text
        assert markup is None

    def test_unknown_payload(self):
        with pytest.raises(TypeError):
            render_notification(object())


class TestTelegramNotificationDispatcher:
    @pytest.mark.asyncio
    async def test_notify_delivers(self, mock_bot):
        dispatcher = TelegramNotificationDispatcher(mock_bot, [], render_notification)

        assert await dispatcher.notify(1001, _payload()) is True
        mock_bot.send_message.assert_awaited_once()
        assert mock_bot.send_message.await_args.kwargs["chat_id"] == 1001

    @pytest.mark.asyncio
    async def test_blocked_user_swallowed(self, mock_bot):
        mock_bot.send_message.side_effect = TelegramForbiddenError(
            method=_send_message_method(), message="Forbidden: bot was blocked by the user"
        )
        dispatcher = TelegramNotificationDispatcher(mock_bot, [], render_notification)

        assert await dispatcher.notify(1001, _payload()) is False

    @pytest.mark.asyncio
    async def test_api_error_swallowed(self, mock_bot):
        mock_bot.send_message.side_effect = TelegramBadRequest(
            method=_send_message_method(), message="Bad Request: chat not found"
        )
        dispatcher = TelegramNotificationDispatcher(mock_bot, [], render_notification)

        assert await dispatcher.notify(1001, _payload()) is False

    @pytest.mark.asyncio
    async def test_timeout_swallowed(self, mock_bot):
        async def slow_send(**kwargs):
            await asyncio.sleep(1)

        mock_bot.send_message.side_effect = slow_send
        dispatcher = TelegramNotificationDispatcher(
            mock_bot, [], render_notification, timeout=0.01
        )

        assert await dispatcher.notify(1001, _payload()) is False

    @pytest.mark.asyncio
    async def test_notify_admins_counts_deliveries(self, mock_bot):
        mock_bot.send_message.side_effect = [
            None,
            TelegramForbiddenError(method=_send_message_method(), message="Forbidden"),
            None,
        ]
        dispatcher = TelegramNotificationDispatcher(
            mock_bot, [1, 2, 3], render_notification
        )

        assert await dispatcher.notify_admins(_payload()) == 2
        assert mock_bot.send_message.await_count == 3

    @pytest.mark.asyncio
    async def test_notify_admins_without_admins(self, mock_bot):
        dispatcher = TelegramNotificationDispatcher(mock_bot, [], render_notification)

        assert await dispatcher.notify_admins(_payload()) == 0
        mock_bot.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_renderer_failure_swallowed(self):
        bot = MagicMock()
        bot.send_message = AsyncMock()
        renderer = MagicMock(side_effect=RuntimeError("boom"))
        dispatcher = TelegramNotificationDispatcher(bot, [], renderer)

        assert await dispatcher.notify(1001, _payload()) is False
        bot.send_message.assert_not_awaited()


class TestErrorText:
    def test_validation_error_message(self):
        assert error_text(InvalidPhoneNumber()).startswith("❌ Invalid phone format")

    def test_insufficient_balance(self):
        assert "exceeds" in error_text(InsufficientBalance(Decimal("300"), Decimal("1000")))

    def test_already_processed(self):
        assert error_text(AlreadyProcessed()).startswith("⚠️")

    def test_persistence_failure(self):
        assert error_text(PersistenceFailure()) == TRY_AGAIN_LATER

    def test_unclassified_error(self):
        assert error_text(ReferralProgramError("x")) == GENERIC_ERROR


class TestFormatters:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            (Decimal("150.00"), "150 ETB"),
            (Decimal("12.50"), "12.50 ETB"),
            (Decimal("1500"), "1,500 ETB"),
            (None, "0 ETB"),
        ],
    )
    def test_format_etb(self, amount, expected):
        assert format_etb(amount) == expected

    def test_escape_md(self):
        assert escape_md("a_b*c") == "a\\_b\\*c"
        assert escape_md(None) == ""
