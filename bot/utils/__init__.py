"""Bot utilities"""

from bot.utils.callback_parsers import (
    parse_callback_id,
    parse_callback_suffix,
    parse_start_referral_code,
    parse_telegram_id,
    parse_withdrawal_id,
)

__all__ = [
    "parse_callback_id",
    "parse_callback_suffix",
    "parse_start_referral_code",
    "parse_telegram_id",
    "parse_withdrawal_id",
]
