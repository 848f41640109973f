"""
Business logic constants for the referral program.

Central location for business rules and constants used across the application.
This module can be imported by both app.services and bot handlers without circular dependencies.
"""

from decimal import Decimal

# Referral program defaults (ETB)
DEFAULT_COMMISSION_PER_REFERRAL = Decimal("30")
DEFAULT_MIN_PAID_REFERRALS = 4
DEFAULT_MIN_WITHDRAWAL_AMOUNT = Decimal("50")

# Telebirr numbers: country code 251 followed by 9 ASCII digits
TELEBIRR_PHONE_PATTERN = r"^251[0-9]{9}$"

# Bank account numbers after stripping spaces and dashes
BANK_ACCOUNT_PATTERN = r"^[0-9]{8,20}$"

ACCOUNT_NAME_MIN_LENGTH = 2
ACCOUNT_NAME_MAX_LENGTH = 100

# Record id prefixes
COMMISSION_ID_PREFIX = "REF"
WITHDRAWAL_ID_PREFIX = "WD"

# Referral codes: 3 letters from the name + 3 digits
REFERRAL_CODE_PREFIX_LENGTH = 3
REFERRAL_CODE_FALLBACK_PREFIX = "JUT"
REFERRAL_CODE_MAX_ATTEMPTS = 10
