"""
Notification service module.

Structure:
- payloads.py: Structured notification events
- dispatcher.py: Telegram delivery with logged, non-raising failures

Usage:
    from app.services.notification import TelegramNotificationDispatcher

    dispatcher = TelegramNotificationDispatcher(bot, admin_ids, render_notification)
    await dispatcher.notify(user_id, payload)
    await dispatcher.notify_admins(payload)
"""

from app.services.notification.dispatcher import (
    NotificationDispatcher,
    TelegramNotificationDispatcher,
)
from app.services.notification.payloads import (
    CommissionCredited,
    NotificationPayload,
    PaymentRejected,
    WithdrawalApproved,
    WithdrawalRejected,
    WithdrawalRequested,
)


__all__ = [
    "NotificationDispatcher",
    "TelegramNotificationDispatcher",
    "NotificationPayload",
    "CommissionCredited",
    "WithdrawalRequested",
    "WithdrawalApproved",
    "WithdrawalRejected",
    "PaymentRejected",
]
