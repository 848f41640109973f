"""
Withdrawal States
FSM states for the withdrawal form
"""

from aiogram.fsm.state import State, StatesGroup


class WithdrawalStates(StatesGroup):
    """States for withdrawal request collection"""

    selecting_method = State()  # Telebirr or bank transfer
    waiting_for_amount = State()
    waiting_for_phone = State()  # Telebirr only
    waiting_for_account_number = State()  # Bank transfer only
    waiting_for_account_name = State()  # Bank transfer only
