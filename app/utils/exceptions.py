"""
Exception handling utilities.

Defines the referral program error taxonomy and categorized exception
types for proper error handling.
"""

from enum import Enum

from aiogram.exceptions import TelegramAPIError


class ReferralProgramError(Exception):
    """Base class for referral / withdrawal failures."""

    default_message = "Referral program error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


# Validation: malformed input, recoverable by re-prompting

class ValidationError(ReferralProgramError):
    """Raised when user input at a workflow step is malformed."""

    default_message = "Invalid input"


class InvalidPaymentMethod(ValidationError):
    default_message = "Unknown payment method"


class InvalidAmount(ValidationError):
    default_message = "Invalid withdrawal amount"


class InvalidPhoneNumber(ValidationError):
    default_message = "Invalid phone format. Use: 251912345678"


class InvalidAccountNumber(ValidationError):
    default_message = "Invalid bank account number"


class InvalidAccountName(ValidationError):
    default_message = "Invalid account holder name"


# Eligibility: thresholds unmet, terminal for the attempt

class IneligibilityReason(str, Enum):
    """Which withdrawal constraint failed."""

    NOT_ENOUGH_REFERRALS = "not_enough_referrals"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    WITHDRAWALS_DISABLED = "withdrawals_disabled"


class NotEligible(ReferralProgramError):
    """Raised when a withdrawal threshold is not met."""

    default_message = "Not eligible for withdrawal"

    def __init__(
        self,
        reason: IneligibilityReason,
        missing_referrals: int = 0,
        message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.missing_referrals = missing_referrals


class InsufficientBalance(NotEligible):
    """Raised when an amount exceeds the available balance."""

    default_message = "Amount exceeds available balance"

    def __init__(
        self,
        balance: object = None,
        amount: object = None,
        message: str | None = None,
    ) -> None:
        super().__init__(IneligibilityReason.INSUFFICIENT_BALANCE, 0, message)
        self.balance = balance
        self.amount = amount


# Lookup / state failures

class NotFound(ReferralProgramError):
    default_message = "Record not found"


class AccountNotFound(NotFound):
    default_message = "Account not found"


class WithdrawalNotFound(NotFound):
    default_message = "Withdrawal request not found"


class AlreadyProcessed(ReferralProgramError):
    """Raised on a second approval/rejection of the same request."""

    default_message = "Withdrawal request already processed"


class DuplicateCommission(ReferralProgramError):
    """Raised when a referral pair was already credited."""

    default_message = "Referral commission already credited"


# Persistence

class DuplicateRecord(ReferralProgramError):
    """Raised by the store when an id or unique key already exists."""

    default_message = "Record already exists"


class PersistenceFailure(ReferralProgramError):
    """Raised when the store is unavailable; nothing was committed."""

    default_message = "Storage unavailable, please try again later"


# Exception categories based on handling strategy

# Safe to ignore - operations that fail gracefully
SAFE_TO_IGNORE = (
    TelegramAPIError,  # Message delivery, editing, etc.
)

# Must be shown to the initiating user
USER_FACING = (
    ValidationError,
    NotEligible,
    NotFound,
    AlreadyProcessed,
    PersistenceFailure,
)


def is_safe_to_ignore(exc: Exception) -> bool:
    """
    Check if exception can be safely ignored.

    Args:
        exc: Exception to check

    Returns:
        True if exception is safe to ignore
    """
    return isinstance(exc, SAFE_TO_IGNORE)


def is_user_facing(exc: Exception) -> bool:
    """Check if exception carries a message meant for the user."""
    return isinstance(exc, USER_FACING)
