"""
Notification dispatcher.

Delivers structured payloads to users and admins over Telegram.
Delivery is fire-and-forget: failures are logged, never raised.
"""

import asyncio
from collections.abc import Callable, Iterable
from typing import Any, Protocol

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError, TelegramForbiddenError
from loguru import logger

from app.config.constants import TELEGRAM_TIMEOUT
from app.services.notification.payloads import NotificationPayload

# payload -> (text, reply_markup or None)
Renderer = Callable[[NotificationPayload], tuple[str, Any]]


class NotificationDispatcher(Protocol):
    """What the referral core needs from a notifier."""

    async def notify(
        self, recipient_id: int, payload: NotificationPayload
    ) -> bool:
        ...

    async def notify_admins(self, payload: NotificationPayload) -> int:
        ...


class TelegramNotificationDispatcher:
    """
    Telegram-backed dispatcher.

    Args:
        bot: aiogram Bot instance
        admin_ids: Telegram IDs that receive admin payloads
        renderer: Turns a payload into message text and keyboard
        timeout: Seconds to wait for one send
        parse_mode: Telegram parse mode of rendered text
    """

    def __init__(
        self,
        bot: Bot,
        admin_ids: Iterable[int],
        renderer: Renderer,
        timeout: float = TELEGRAM_TIMEOUT,
        parse_mode: str | None = "Markdown",
    ) -> None:
        self.bot = bot
        self.admin_ids = list(admin_ids)
        self.renderer = renderer
        self.timeout = timeout
        self.parse_mode = parse_mode

    async def notify(
        self, recipient_id: int, payload: NotificationPayload
    ) -> bool:
        """
        Send a payload to one recipient.

        Args:
            recipient_id: Telegram chat ID
            payload: Structured notification

        Returns:
            True if delivered
        """
        try:
            text, reply_markup = self.renderer(payload)
            await asyncio.wait_for(
                self.bot.send_message(
                    chat_id=recipient_id,
                    text=text,
                    reply_markup=reply_markup,
                    parse_mode=self.parse_mode,
                ),
                timeout=self.timeout,
            )
            return True
        except TelegramForbiddenError:
            logger.info(
                f"User {recipient_id} blocked the bot, "
                f"{type(payload).__name__} not delivered"
            )
        except (TelegramAPIError, asyncio.TimeoutError) as e:
            logger.warning(
                "Notification delivery failed",
                extra={
                    "recipient_id": recipient_id,
                    "payload": type(payload).__name__,
                    "error": str(e),
                },
            )
        except Exception as e:
            logger.error(
                f"Unexpected error sending {type(payload).__name__} "
                f"to {recipient_id}: {e}",
                exc_info=True,
            )
        return False

    async def notify_admins(self, payload: NotificationPayload) -> int:
        """
        Send a payload to every configured admin.

        Returns:
            Number of admins reached
        """
        if not self.admin_ids:
            logger.warning(
                f"No admins configured to receive {type(payload).__name__}"
            )
            return 0

        delivered = 0
        for admin_id in self.admin_ids:
            if await self.notify(admin_id, payload):
                delivered += 1
        return delivered
