"""
Admin States
FSM states for admin operations
"""

from aiogram.fsm.state import State, StatesGroup


class AdminStates(StatesGroup):
    """States for admin operations"""

    # Withdrawal management
    waiting_for_rejection_reason = State()  # Free-text reason for a rejection

    # Registration payment review
    waiting_for_payment_rejection_reason = State()
