"""
Withdrawal approval.

Admin resolution of pending withdrawal requests. The status change and
the balance debit are conditional UPDATEs committed together, so a
request is resolved at most once and an approval never overdraws.
"""

from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import WithdrawalStatus
from app.models.withdrawal_request import WithdrawalRequest
from app.repositories.account_repository import AccountRepository
from app.repositories.withdrawal_request_repository import (
    WithdrawalRequestRepository,
)
from app.services.base_service import BaseService
from app.services.notification.dispatcher import NotificationDispatcher
from app.services.notification.payloads import (
    WithdrawalApproved,
    WithdrawalRejected,
)
from app.utils.exceptions import (
    AccountNotFound,
    AlreadyProcessed,
    InsufficientBalance,
    PersistenceFailure,
    WithdrawalNotFound,
)


class WithdrawalApprovalService(BaseService):
    """Approve or reject pending withdrawal requests."""

    def __init__(
        self,
        session: AsyncSession,
        notifier: NotificationDispatcher | None = None,
    ) -> None:
        """
        Initialize approval service.

        Args:
            session: Database session
            notifier: Informs the requester of the outcome
        """
        super().__init__(session)
        self.notifier = notifier
        self.account_repo = AccountRepository(session)
        self.withdrawal_repo = WithdrawalRequestRepository(session)

    async def get_pending_withdrawals(
        self, limit: int | None = None
    ) -> list[WithdrawalRequest]:
        """Pending requests, oldest first."""
        return await self.withdrawal_repo.get_pending(limit=limit)

    async def count_pending_withdrawals(self) -> int:
        return await self.withdrawal_repo.count(
            status=WithdrawalStatus.PENDING.value
        )

    async def approve_withdrawal(
        self, request_id: str, admin_id: int | None
    ) -> WithdrawalRequest:
        """
        Approve a pending request and debit the requester.

        Args:
            request_id: Withdrawal request ID
            admin_id: Approving admin Telegram ID

        Returns:
            Approved request

        Raises:
            WithdrawalNotFound: Unknown request id
            AlreadyProcessed: Request is no longer pending
            InsufficientBalance: Balance dropped below the amount
            PersistenceFailure: Store error, nothing committed
        """
        try:
            request = await self._get_pending(request_id)
            user_id = request.user_id
            amount = request.amount

            approved = await self.withdrawal_repo.transition(
                request_id, WithdrawalStatus.APPROVED, admin_id
            )
            if approved is None:
                await self.rollback()
                raise AlreadyProcessed()

            account = await self.account_repo.apply_withdrawal(user_id, amount)
            if account is None:
                await self.rollback()
                await self._raise_debit_failure(request_id, user_id, amount)

            await self.commit()
        except SQLAlchemyError as e:
            await self.rollback()
            self._log_store_error("approve", request_id, admin_id, e)
            raise PersistenceFailure() from e

        self.logger.info(
            "Withdrawal approved",
            extra={
                "withdrawal_id": request_id,
                "user_id": user_id,
                "amount": str(amount),
                "admin_id": admin_id,
                "new_balance": str(account.balance),
            },
        )

        if self.notifier is not None:
            await self.notifier.notify(
                user_id,
                WithdrawalApproved(
                    withdrawal_id=request_id,
                    user_id=user_id,
                    amount=amount,
                    new_balance=account.balance,
                ),
            )
        return approved

    async def reject_withdrawal(
        self, request_id: str, admin_id: int | None, reason: str
    ) -> WithdrawalRequest:
        """
        Reject a pending request. The balance is not touched.

        Args:
            request_id: Withdrawal request ID
            admin_id: Rejecting admin Telegram ID
            reason: Free text shown to the requester

        Returns:
            Rejected request

        Raises:
            WithdrawalNotFound: Unknown request id
            AlreadyProcessed: Request is no longer pending
            PersistenceFailure: Store error, nothing committed
        """
        reason = (reason or "").strip() or "No reason given"

        try:
            request = await self._get_pending(request_id)
            user_id = request.user_id
            amount = request.amount

            rejected = await self.withdrawal_repo.transition(
                request_id,
                WithdrawalStatus.REJECTED,
                admin_id,
                rejection_reason=reason,
            )
            if rejected is None:
                await self.rollback()
                raise AlreadyProcessed()
            await self.commit()
        except SQLAlchemyError as e:
            await self.rollback()
            self._log_store_error("reject", request_id, admin_id, e)
            raise PersistenceFailure() from e

        self.logger.info(
            "Withdrawal rejected",
            extra={
                "withdrawal_id": request_id,
                "user_id": user_id,
                "admin_id": admin_id,
                "reason": reason,
            },
        )

        if self.notifier is not None:
            await self.notifier.notify(
                user_id,
                WithdrawalRejected(
                    withdrawal_id=request_id,
                    user_id=user_id,
                    amount=amount,
                    reason=reason,
                ),
            )
        return rejected

    async def _get_pending(self, request_id: str) -> WithdrawalRequest:
        request = await self.withdrawal_repo.get_by_id(
            request_id, refresh=True
        )
        if not request:
            raise WithdrawalNotFound(
                f"Withdrawal request {request_id} not found"
            )
        if not request.is_pending:
            raise AlreadyProcessed(
                f"Withdrawal request {request_id} is already {request.status}"
            )
        return request

    async def _raise_debit_failure(
        self, request_id: str, user_id: int, amount: Decimal
    ) -> None:
        account = await self.account_repo.get_by_id(user_id, refresh=True)
        if account is None:
            raise AccountNotFound(f"Account {user_id} not found")

        self.logger.warning(
            "Withdrawal approval refused, balance too low",
            extra={
                "withdrawal_id": request_id,
                "user_id": user_id,
                "amount": str(amount),
                "balance": str(account.balance),
            },
        )
        raise InsufficientBalance(
            balance=account.balance,
            amount=amount,
            message=(
                f"Balance {account.balance} ETB no longer covers "
                f"{amount} ETB"
            ),
        )

    def _log_store_error(
        self,
        action: str,
        request_id: str,
        admin_id: int | None,
        error: SQLAlchemyError,
    ) -> None:
        self.logger.error(
            f"Failed to {action} withdrawal",
            extra={
                "withdrawal_id": request_id,
                "admin_id": admin_id,
                "error": str(error),
            },
            exc_info=True,
        )
