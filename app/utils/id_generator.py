"""
Record id and referral code generation.

Ids combine the owning account(s) with a millisecond timestamp, which
makes accidental collisions unlikely but not impossible; uniqueness is
still enforced by the database.
"""

import secrets
import time

from app.config.business_constants import (
    COMMISSION_ID_PREFIX,
    REFERRAL_CODE_FALLBACK_PREFIX,
    REFERRAL_CODE_PREFIX_LENGTH,
    WITHDRAWAL_ID_PREFIX,
)


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_commission_id(referrer_id: int, referred_user_id: int) -> str:
    """Build REF_<referrer>_<referred>_<ms>."""
    return f"{COMMISSION_ID_PREFIX}_{referrer_id}_{referred_user_id}_{_now_ms()}"


def generate_withdrawal_id(user_id: int) -> str:
    """Build WD_<user>_<ms>."""
    return f"{WITHDRAWAL_ID_PREFIX}_{user_id}_{_now_ms()}"


def generate_referral_code(full_name: str | None) -> str:
    """
    Generate a referral code from a user's name.

    First three letters of the name upper-cased, followed by three
    random digits (100-999). Names without enough Latin letters fall
    back to a fixed prefix.

    Args:
        full_name: Name given at registration

    Returns:
        Code like "ABE482"
    """
    letters = "".join(
        ch for ch in (full_name or "") if ch.isascii() and ch.isalpha()
    )
    prefix = letters[:REFERRAL_CODE_PREFIX_LENGTH].upper()
    if len(prefix) < REFERRAL_CODE_PREFIX_LENGTH:
        prefix = REFERRAL_CODE_FALLBACK_PREFIX
    return f"{prefix}{100 + secrets.randbelow(900)}"
