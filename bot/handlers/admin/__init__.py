"""Admin handlers package"""

from bot.handlers.admin import panel, payments, students, withdrawals


__all__ = [
    "panel",
    "payments",
    "students",
    "withdrawals",
]
