"""
Button text constants.

Centralized button text constants organized by category:
- main_menu: User main menu buttons
- withdrawals: User withdrawals and admin review
- referrals: Referral system
- admin: Admin panel buttons
- inline: Inline callback data prefixes

All classes are re-exported here for backward compatibility.
"""

from bot.keyboards.buttons.admin import AdminButtons
from bot.keyboards.buttons.inline import CallbackPrefixes
from bot.keyboards.buttons.main_menu import MainMenuButtons
from bot.keyboards.buttons.referrals import ReferralButtons
from bot.keyboards.buttons.withdrawals import WithdrawalButtons


__all__ = [
    "AdminButtons",
    "CallbackPrefixes",
    "MainMenuButtons",
    "ReferralButtons",
    "WithdrawalButtons",
]
