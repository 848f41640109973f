"""
Tests for bot middlewares.

Handlers are AsyncMocks; events are Message/CallbackQuery mocks with an
awaitable answer().
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.types import CallbackQuery, Message, User

from app.config.settings import settings
from app.utils.exceptions import AlreadyProcessed
from bot.messages.admin_messages import ADMIN_ACCESS_DENIED
from bot.messages.error_messages import GENERIC_ERROR, error_text
from bot.messages.user_messages import ACCOUNT_BLOCKED
from bot.middlewares import (
    AccessMiddleware,
    AdminAuthMiddleware,
    ErrorHandlerMiddleware,
)


def _message() -> MagicMock:
    message = MagicMock(spec=Message)
    message.answer = AsyncMock()
    return message


def _callback() -> MagicMock:
    callback = MagicMock(spec=CallbackQuery)
    callback.answer = AsyncMock()
    return callback


def _user(user_id: int) -> User:
    return User(id=user_id, is_bot=False, first_name="Test")


class TestAdminAuthMiddleware:
    @pytest.mark.asyncio
    async def test_admin_passes(self):
        handler = AsyncMock(return_value="ok")
        event = _message()

        result = await AdminAuthMiddleware()(
            handler, event, {"event_from_user": _user(900001)}
        )

        assert result == "ok"
        handler.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_non_admin_message_refused(self):
        handler = AsyncMock()
        event = _message()

        result = await AdminAuthMiddleware()(
            handler, event, {"event_from_user": _user(1001)}
        )

        assert result is None
        handler.assert_not_awaited()
        event.answer.assert_awaited_once_with(ADMIN_ACCESS_DENIED)

    @pytest.mark.asyncio
    async def test_non_admin_callback_gets_alert(self):
        handler = AsyncMock()
        event = _callback()

        await AdminAuthMiddleware()(
            handler, event, {"event_from_user": _user(1001), "is_admin": False}
        )

        handler.assert_not_awaited()
        event.answer.assert_awaited_once_with(ADMIN_ACCESS_DENIED, show_alert=True)

    @pytest.mark.asyncio
    async def test_precomputed_admin_flag_used(self):
        handler = AsyncMock()

        await AdminAuthMiddleware()(
            handler, _message(), {"event_from_user": _user(1001), "is_admin": True}
        )

        handler.assert_awaited_once()


class TestAccessMiddleware:
    @pytest.mark.asyncio
    async def test_regular_user_passes(self, account_factory):
        handler = AsyncMock(return_value="ok")

        result = await AccessMiddleware()(
            handler, _message(), {"account": account_factory(), "is_admin": False}
        )

        assert result == "ok"

    @pytest.mark.asyncio
    async def test_unregistered_user_passes(self):
        handler = AsyncMock()

        await AccessMiddleware()(handler, _message(), {"account": None})

        handler.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_blocked_account_dropped(self, account_factory):
        handler = AsyncMock()
        event = _message()

        result = await AccessMiddleware()(
            handler, event, {"account": account_factory(status="blocked")}
        )

        assert result is None
        handler.assert_not_awaited()
        event.answer.assert_awaited_once_with(ACCOUNT_BLOCKED)

    @pytest.mark.asyncio
    async def test_maintenance_mode(self, monkeypatch):
        monkeypatch.setattr(settings, "maintenance_mode", True)
        handler = AsyncMock()
        event = _callback()

        await AccessMiddleware()(handler, event, {"is_admin": False})

        handler.assert_not_awaited()
        event.answer.assert_awaited_once()
        assert event.answer.await_args.kwargs["show_alert"] is True

    @pytest.mark.asyncio
    async def test_admin_bypasses_maintenance(self, monkeypatch):
        monkeypatch.setattr(settings, "maintenance_mode", True)
        handler = AsyncMock()

        await AccessMiddleware()(handler, _message(), {"is_admin": True})

        handler.assert_awaited_once()


class TestErrorHandlerMiddleware:
    @staticmethod
    def _event(user_id: int = 1001) -> MagicMock:
        event = _message()
        event.from_user = _user(user_id)
        return event

    @pytest.mark.asyncio
    async def test_user_facing_error_reaches_user_only(self, mock_bot):
        handler = AsyncMock(side_effect=AlreadyProcessed())

        result = await ErrorHandlerMiddleware()(handler, self._event(), {"bot": mock_bot})

        assert result is None
        mock_bot.send_message.assert_awaited_once_with(
            chat_id=1001, text=error_text(AlreadyProcessed())
        )

    @pytest.mark.asyncio
    async def test_unexpected_error_alerts_admin(self, mock_bot):
        handler = AsyncMock(side_effect=RuntimeError("boom"))

        await ErrorHandlerMiddleware()(handler, self._event(), {"bot": mock_bot})

        recipients = [call.kwargs["chat_id"] for call in mock_bot.send_message.await_args_list]
        assert recipients == [1001, 900001]
        assert mock_bot.send_message.await_args_list[0].kwargs["text"] == GENERIC_ERROR
