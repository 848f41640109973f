"""
Callback and command argument parsers.

Safe extraction of ids and codes from callback_data and /start payloads.
Anything malformed comes back as None.
"""

import re


# Withdrawal ids look like WD_<telegram id>_<ms timestamp>
_WITHDRAWAL_ID_PATTERN = re.compile(r"^WD_[0-9]+_[0-9]+$")

# Telegram ids in callback data and command arguments
_TELEGRAM_ID_PATTERN = re.compile(r"^[0-9]{1,20}$")

# Referral codes: letters and digits only
_REFERRAL_CODE_PATTERN = re.compile(r"^[A-Za-z0-9]{3,20}$")


def parse_callback_id(callback_data: str | None, prefix: str) -> int | None:
    """
    Extract a numeric ID from prefixed callback data.

    Args:
        callback_data: Callback data (e.g. "approve_payment_12345")
        prefix: Expected prefix (e.g. "approve_payment_")

    Returns:
        Parsed ID or None

    Examples:
        >>> parse_callback_id("approve_payment_123", "approve_payment_")
        123
        >>> parse_callback_id("approve_payment_abc", "approve_payment_")
        >>> parse_callback_id("wrong_prefix_123", "approve_payment_")
    """
    return parse_telegram_id(parse_callback_suffix(callback_data, prefix))


def parse_telegram_id(text: str | None) -> int | None:
    """ASCII-digit Telegram id, or None."""
    if not text or not _TELEGRAM_ID_PATTERN.match(text.strip()):
        return None
    return int(text.strip())


def parse_callback_suffix(callback_data: str | None, prefix: str) -> str | None:
    """Text after the prefix, or None if the prefix is missing or nothing follows."""
    if not callback_data or not callback_data.startswith(prefix):
        return None
    suffix = callback_data[len(prefix):]
    return suffix or None


def parse_withdrawal_id(callback_data: str | None, prefix: str) -> str | None:
    """
    Extract a withdrawal request ID from prefixed callback data.

    Examples:
        >>> parse_withdrawal_id("approve_withdrawal_WD_1_2", "approve_withdrawal_")
        'WD_1_2'
    """
    suffix = parse_callback_suffix(callback_data, prefix)
    if suffix is None or not _WITHDRAWAL_ID_PATTERN.match(suffix):
        return None
    return suffix


def parse_start_referral_code(arg: str | None) -> str | None:
    """
    Referral code from a /start payload.

    Accepts "ref_CODE", "ref-CODE" and a bare "CODE". Codes are matched
    upper-case.

    Args:
        arg: Text after /start

    Returns:
        Referral code or None
    """
    if not arg:
        return None

    code = arg.strip()
    if code[:4].lower() in ("ref_", "ref-"):
        code = code[4:]

    if not _REFERRAL_CODE_PATTERN.match(code):
        return None
    return code.upper()
