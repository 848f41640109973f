"""
Withdrawal request repository.

Data access layer for WithdrawalRequest model.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import WithdrawalStatus
from app.models.withdrawal_request import WithdrawalRequest
from app.repositories.base import BaseRepository


class WithdrawalRequestRepository(BaseRepository[WithdrawalRequest]):
    """Withdrawal request repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize withdrawal request repository."""
        super().__init__(WithdrawalRequest, session)

    async def get_pending(
        self, limit: int | None = None
    ) -> list[WithdrawalRequest]:
        """
        Get pending requests, oldest first.

        Args:
            limit: Max number of results

        Returns:
            List of pending requests
        """
        return await self.find_all(
            limit=limit,
            order_by="requested_at",
            status=WithdrawalStatus.PENDING.value,
        )

    async def transition(
        self,
        request_id: str,
        new_status: WithdrawalStatus,
        admin_id: int | None,
        **fields: Any,
    ) -> WithdrawalRequest | None:
        """
        Resolve a pending request.

        The status check is part of the UPDATE, so of two concurrent
        admin actions on the same request only one can win.

        Args:
            request_id: Withdrawal request ID
            new_status: approved or rejected
            admin_id: Processing admin Telegram ID
            **fields: Extra columns (e.g. rejection_reason)

        Returns:
            Fresh request, or None if it was not pending
        """
        values = {
            "status": new_status.value,
            "processed_at": datetime.now(UTC),
            "processed_by": admin_id,
            **fields,
        }
        return await self._conditional_update(
            (WithdrawalRequest.id == request_id)
            & (WithdrawalRequest.status == WithdrawalStatus.PENDING.value),
            request_id,
            values,
        )
