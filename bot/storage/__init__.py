"""
Bot storage adapters.

Persistence of conversational state on top of aiogram FSM storage.
"""

from bot.storage.withdrawal_session_store import FsmWithdrawalSessionStore


__all__ = ["FsmWithdrawalSessionStore"]
