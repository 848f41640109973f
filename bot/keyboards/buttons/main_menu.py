"""Main menu button constants for regular users."""


class MainMenuButtons:
    """Main menu buttons for regular users."""

    # Balance & Withdrawals
    BALANCE = "💰 Balance"
    WITHDRAWAL = "💸 Withdraw"

    # Referrals
    REFERRALS = "👥 My Referrals"
