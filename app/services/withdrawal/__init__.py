"""
Withdrawal services package.

This package provides the withdrawal flow:
- session: Tagged per-step form state and the session store contract
- workflow: Multi-step request collection ending in a pending request
- approval: Admin approval / rejection with the balance debit

All components are re-exported for easy importing.
"""

from app.services.withdrawal.approval import WithdrawalApprovalService
from app.services.withdrawal.session import (
    CollectingAccountName,
    CollectingAccountNumber,
    CollectingAmount,
    CollectingPhone,
    SelectingMethod,
    WithdrawalSession,
    WithdrawalSessionStore,
    WorkflowStep,
    session_from_data,
    session_to_data,
)
from app.services.withdrawal.workflow import StepResult, WithdrawalWorkflow

__all__ = [
    "WithdrawalWorkflow",
    "WithdrawalApprovalService",
    "StepResult",
    "WorkflowStep",
    "WithdrawalSession",
    "WithdrawalSessionStore",
    "SelectingMethod",
    "CollectingAmount",
    "CollectingPhone",
    "CollectingAccountNumber",
    "CollectingAccountName",
    "session_to_data",
    "session_from_data",
]
