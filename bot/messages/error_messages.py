"""
Error Message Templates.

Friendly messages for users, English technical details for admins.
Every typed failure of the referral core maps to exactly one reply.
"""

import traceback

from loguru import logger

from app.utils.exceptions import (
    AlreadyProcessed,
    DuplicateCommission,
    NotEligible,
    NotFound,
    PersistenceFailure,
    ReferralProgramError,
    ValidationError,
)


# ============================================================================
# USER ERROR MESSAGES
# ============================================================================

DATABASE_ERROR = (
    "❌ Database error\n\n"
    "We hit a temporary storage problem. Nothing was saved.\n"
    "Please try again later."
)

MAINTENANCE_MODE = (
    "🔧 Maintenance\n\n"
    "The bot is temporarily unavailable for maintenance.\n"
    "Please try again later."
)

GENERIC_ERROR = (
    "❌ An error occurred\n\n"
    "Administrators have been notified.\n"
    "Please try again later."
)

TRY_AGAIN_LATER = "⏳ Storage unavailable, please try again in a few minutes."


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================


def error_text(error: ReferralProgramError) -> str:
    """
    User-facing reply for a referral program failure.

    Args:
        error: Raised failure

    Returns:
        Plain text reply
    """
    if isinstance(error, PersistenceFailure):
        return TRY_AGAIN_LATER
    if isinstance(error, (AlreadyProcessed, DuplicateCommission)):
        return f"⚠️ {error.message}"
    if isinstance(error, (ValidationError, NotEligible, NotFound)):
        return f"❌ {error.message}"
    return GENERIC_ERROR


def format_error_for_admin(error: Exception, user_id: int, context: str | None = None) -> str:
    """
    Format detailed error message for admin notification.

    Args:
        error: The exception that occurred
        user_id: Telegram user ID who encountered the error
        context: Optional context information (handler name, operation, etc.)

    Returns:
        Formatted admin error message with technical details
    """
    exception_name = type(error).__name__
    exception_message = str(error)[:300]  # Limit message length

    try:
        error_trace = traceback.format_exc()[-1000:]
    except Exception:
        error_trace = "Traceback not available"

    admin_message = (
        f"🚨 CRITICAL ERROR\n\n"
        f"👤 User ID: {user_id}\n"
        f"❌ Exception: {exception_name}\n"
    )

    if context:
        admin_message += f"📍 Context: {context}\n"

    admin_message += (
        f"📝 Message: {exception_message}\n\n"
        f"Traceback:\n{error_trace}"
    )

    logger.error(
        "Error formatted for admin notification",
        extra={
            "user_id": user_id,
            "exception_type": exception_name,
            "exception_message": exception_message,
            "context": context,
        },
    )

    return admin_message[:4096]  # Telegram message limit
