"""
Application constants.

Centralized constants for the application.
"""

# ========================================================================
# TELEGRAM BOT CONSTANTS
# ========================================================================

# Telegram bot timeouts (in seconds)
TELEGRAM_TIMEOUT = 10.0  # Telegram API operations timeout

# ========================================================================
# ADMIN LISTS
# ========================================================================

# Pending withdrawals shown per admin request
PENDING_WITHDRAWALS_PAGE_SIZE = 5

# ========================================================================
# FSM STORAGE
# ========================================================================

# Withdrawal sessions are abandoned after this many seconds of silence
WITHDRAWAL_SESSION_TTL_SECONDS = 30 * 60
