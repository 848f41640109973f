"""Withdrawal input validation utilities."""

import re
from decimal import Decimal

from app.config.business_constants import (
    ACCOUNT_NAME_MAX_LENGTH,
    ACCOUNT_NAME_MIN_LENGTH,
    BANK_ACCOUNT_PATTERN,
    TELEBIRR_PHONE_PATTERN,
)
from app.utils.exceptions import (
    InvalidAccountName,
    InvalidAccountNumber,
    InvalidAmount,
    InvalidPhoneNumber,
)

_AMOUNT_RE = re.compile(r"^[0-9]+$")
_PHONE_RE = re.compile(TELEBIRR_PHONE_PATTERN)
_BANK_ACCOUNT_RE = re.compile(BANK_ACCOUNT_PATTERN)
_ACCOUNT_SEPARATORS_RE = re.compile(r"[\s-]+")


def parse_withdrawal_amount(text: str, min_amount: Decimal) -> Decimal:
    """
    Parse a withdrawal amount typed by the user.

    Only whole ETB amounts are accepted.

    Args:
        text: Raw message text
        min_amount: Smallest amount allowed

    Returns:
        Amount as Decimal

    Raises:
        InvalidAmount: If not a positive integer or below min_amount
    """
    cleaned = (text or "").strip()
    if not _AMOUNT_RE.match(cleaned):
        raise InvalidAmount("Please enter a valid whole number amount")

    amount = Decimal(int(cleaned))
    if amount <= 0:
        raise InvalidAmount("Amount must be greater than zero")
    if amount < min_amount:
        raise InvalidAmount(f"Minimum withdrawal amount is {min_amount} ETB")
    return amount


def validate_telebirr_phone(text: str) -> str:
    """
    Validate a Telebirr phone number (251XXXXXXXXX).

    Raises:
        InvalidPhoneNumber: If the format does not match
    """
    phone = (text or "").strip()
    if not _PHONE_RE.match(phone):
        raise InvalidPhoneNumber()
    return phone


def normalize_account_number(text: str) -> str:
    """
    Strip spaces and dashes from a bank account number and validate it.

    Args:
        text: Raw account number

    Returns:
        Digits-only account number

    Raises:
        InvalidAccountNumber: If not 8-20 digits
    """
    account_number = _ACCOUNT_SEPARATORS_RE.sub("", text or "")
    if not _BANK_ACCOUNT_RE.match(account_number):
        raise InvalidAccountNumber(
            "Account number must contain 8 to 20 digits"
        )
    return account_number


def validate_account_name(text: str) -> str:
    """Validate an account holder name, collapsing inner whitespace."""
    name = " ".join((text or "").split())
    if not ACCOUNT_NAME_MIN_LENGTH <= len(name) <= ACCOUNT_NAME_MAX_LENGTH:
        raise InvalidAccountName(
            f"Account name must be {ACCOUNT_NAME_MIN_LENGTH}-"
            f"{ACCOUNT_NAME_MAX_LENGTH} characters"
        )
    return name
