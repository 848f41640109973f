"""
Keyboards.

Telegram keyboards (reply and inline).

This module exports all keyboard components:
- Button classes: Centralized button text constants
- Keyboard functions: Pre-built keyboard factories
"""

# ============================================================================
# ADMIN KEYBOARDS
# ============================================================================
from bot.keyboards.admin_keyboards import (
    admin_cancel_keyboard,
    admin_menu_reply_keyboard,
    payment_approval_keyboard,
    withdrawal_review_keyboard,
)

# ============================================================================
# USER KEYBOARDS
# ============================================================================
from bot.keyboards.user_keyboards import (
    main_menu_reply_keyboard,
    payment_method_keyboard,
    referral_keyboard,
    withdrawal_cancel_keyboard,
)


__all__ = [
    # Admin keyboards
    "admin_cancel_keyboard",
    "admin_menu_reply_keyboard",
    "payment_approval_keyboard",
    "withdrawal_review_keyboard",
    # User keyboards
    "main_menu_reply_keyboard",
    "payment_method_keyboard",
    "referral_keyboard",
    "withdrawal_cancel_keyboard",
]
