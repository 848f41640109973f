"""
FSM States.

State groups for multi-step dialogs.
"""

from bot.states.admin_states import AdminStates
from bot.states.withdrawal import WithdrawalStates


__all__ = [
    "AdminStates",
    "WithdrawalStates",
]
