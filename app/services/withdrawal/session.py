"""
Withdrawal conversation state.

Each step of the withdrawal form is its own frozen dataclass carrying
exactly the fields collected so far. No session means no withdrawal in
progress.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol

from app.models.enums import PaymentMethod


class WorkflowStep(str, Enum):
    """Where a user is in the withdrawal form."""

    IDLE = "idle"
    SELECTING_METHOD = "selecting_method"
    COLLECTING_AMOUNT = "collecting_amount"
    COLLECTING_PHONE = "collecting_phone"
    COLLECTING_ACCOUNT_NUMBER = "collecting_account_number"
    COLLECTING_ACCOUNT_NAME = "collecting_account_name"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SelectingMethod:
    @property
    def step(self) -> WorkflowStep:
        return WorkflowStep.SELECTING_METHOD


@dataclass(frozen=True)
class CollectingAmount:
    method: PaymentMethod

    @property
    def step(self) -> WorkflowStep:
        return WorkflowStep.COLLECTING_AMOUNT


@dataclass(frozen=True)
class CollectingPhone:
    """Telebirr branch: amount accepted, waiting for the phone number."""

    method: PaymentMethod
    amount: Decimal

    @property
    def step(self) -> WorkflowStep:
        return WorkflowStep.COLLECTING_PHONE


@dataclass(frozen=True)
class CollectingAccountNumber:
    """Bank branch: amount accepted, waiting for the account number."""

    amount: Decimal

    @property
    def step(self) -> WorkflowStep:
        return WorkflowStep.COLLECTING_ACCOUNT_NUMBER


@dataclass(frozen=True)
class CollectingAccountName:
    amount: Decimal
    account_number: str

    @property
    def step(self) -> WorkflowStep:
        return WorkflowStep.COLLECTING_ACCOUNT_NAME


WithdrawalSession = (
    SelectingMethod
    | CollectingAmount
    | CollectingPhone
    | CollectingAccountNumber
    | CollectingAccountName
)


def session_to_data(session: WithdrawalSession) -> dict[str, Any]:
    """
    Flatten a session into JSON-safe data for FSM storage.

    Args:
        session: Current session state

    Returns:
        Dict with "step" plus the state's own fields
    """
    data: dict[str, Any] = {"step": session.step.value}
    if isinstance(session, (CollectingAmount, CollectingPhone)):
        data["method"] = session.method.value
    if isinstance(
        session,
        (CollectingPhone, CollectingAccountNumber, CollectingAccountName),
    ):
        data["amount"] = str(session.amount)
    if isinstance(session, CollectingAccountName):
        data["account_number"] = session.account_number
    return data


def session_from_data(data: dict[str, Any] | None) -> WithdrawalSession | None:
    """
    Rebuild a session from stored data.

    Unknown or incomplete data is treated as no session.

    Args:
        data: Dict produced by session_to_data

    Returns:
        Session state or None
    """
    if not data or "step" not in data:
        return None

    try:
        step = WorkflowStep(data["step"])
        if step == WorkflowStep.SELECTING_METHOD:
            return SelectingMethod()
        if step == WorkflowStep.COLLECTING_AMOUNT:
            return CollectingAmount(method=PaymentMethod(data["method"]))
        if step == WorkflowStep.COLLECTING_PHONE:
            return CollectingPhone(
                method=PaymentMethod(data["method"]),
                amount=Decimal(data["amount"]),
            )
        if step == WorkflowStep.COLLECTING_ACCOUNT_NUMBER:
            return CollectingAccountNumber(amount=Decimal(data["amount"]))
        if step == WorkflowStep.COLLECTING_ACCOUNT_NAME:
            return CollectingAccountName(
                amount=Decimal(data["amount"]),
                account_number=data["account_number"],
            )
    except (KeyError, ValueError, ArithmeticError):
        return None
    return None


class WithdrawalSessionStore(Protocol):
    """Per-user ephemeral storage for the withdrawal form."""

    async def get(self, user_id: int) -> WithdrawalSession | None:
        ...

    async def save(self, user_id: int, session: WithdrawalSession) -> None:
        ...

    async def clear(self, user_id: int) -> None:
        ...
