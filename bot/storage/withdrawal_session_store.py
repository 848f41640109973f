"""
Withdrawal session store.

Keeps the withdrawal form state in aiogram FSM storage, so the same
Redis (or memory) backend that holds every other conversation also
holds this one. The FSM state mirrors the form step, which lets the
handlers route messages with plain state filters.
"""

from aiogram.fsm.state import State
from aiogram.fsm.storage.base import BaseStorage, StorageKey
from loguru import logger

from app.services.withdrawal.session import (
    WithdrawalSession,
    WorkflowStep,
    session_from_data,
    session_to_data,
)
from bot.states.withdrawal import WithdrawalStates


# Data key inside the FSM data dict
SESSION_DATA_KEY = "withdrawal"

STATE_BY_STEP: dict[WorkflowStep, State] = {
    WorkflowStep.SELECTING_METHOD: WithdrawalStates.selecting_method,
    WorkflowStep.COLLECTING_AMOUNT: WithdrawalStates.waiting_for_amount,
    WorkflowStep.COLLECTING_PHONE: WithdrawalStates.waiting_for_phone,
    WorkflowStep.COLLECTING_ACCOUNT_NUMBER: (
        WithdrawalStates.waiting_for_account_number
    ),
    WorkflowStep.COLLECTING_ACCOUNT_NAME: (
        WithdrawalStates.waiting_for_account_name
    ),
}

_WITHDRAWAL_STATE_NAMES = {state.state for state in STATE_BY_STEP.values()}


class FsmWithdrawalSessionStore:
    """
    WithdrawalSessionStore over aiogram BaseStorage.

    Sessions are keyed by the user's private chat, matching the
    FSMContext aiogram hands to handlers in that chat.

    Args:
        storage: aiogram FSM storage (RedisStorage, MemoryStorage)
        bot_id: Telegram ID of the bot
    """

    def __init__(self, storage: BaseStorage, bot_id: int) -> None:
        self.storage = storage
        self.bot_id = bot_id

    def _key(self, user_id: int) -> StorageKey:
        return StorageKey(bot_id=self.bot_id, chat_id=user_id, user_id=user_id)

    async def get(self, user_id: int) -> WithdrawalSession | None:
        """Current form state, or None when no withdrawal is in progress."""
        key = self._key(user_id)
        state = await self.storage.get_state(key)
        if state not in _WITHDRAWAL_STATE_NAMES:
            return None

        data = await self.storage.get_data(key)
        session = session_from_data(data.get(SESSION_DATA_KEY))
        if session is None:
            logger.warning(
                f"Discarding unreadable withdrawal session of user {user_id}"
            )
        return session

    async def save(self, user_id: int, session: WithdrawalSession) -> None:
        key = self._key(user_id)
        await self.storage.set_state(key, STATE_BY_STEP[session.step])
        await self.storage.set_data(
            key, {SESSION_DATA_KEY: session_to_data(session)}
        )

    async def clear(self, user_id: int) -> None:
        """Drop the form. Other conversations of the user are left alone."""
        key = self._key(user_id)
        if await self.storage.get_state(key) not in _WITHDRAWAL_STATE_NAMES:
            return
        await self.storage.set_state(key, None)
        await self.storage.set_data(key, {})
