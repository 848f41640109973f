"""
Withdrawal request workflow.

Drives the per-user withdrawal form:
method -> amount -> phone (telebirr) or account number -> name (bank)
-> pending WithdrawalRequest. Nothing is persisted before the last step.

Validation errors come back in StepResult and keep the current step;
eligibility and store failures are raised.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.account import Account
from app.models.enums import PaymentMethod, WithdrawalStatus
from app.models.withdrawal_request import WithdrawalRequest
from app.repositories.account_repository import AccountRepository
from app.repositories.withdrawal_request_repository import (
    WithdrawalRequestRepository,
)
from app.services.base_service import BaseService
from app.services.notification.dispatcher import NotificationDispatcher
from app.services.notification.payloads import WithdrawalRequested
from app.services.referral.config import ReferralProgramConfig
from app.services.referral.eligibility import ensure_can_withdraw
from app.services.withdrawal.session import (
    CollectingAccountName,
    CollectingAccountNumber,
    CollectingAmount,
    CollectingPhone,
    SelectingMethod,
    WithdrawalSession,
    WithdrawalSessionStore,
    WorkflowStep,
)
from app.utils.exceptions import (
    AccountNotFound,
    DuplicateRecord,
    InsufficientBalance,
    InvalidPaymentMethod,
    PersistenceFailure,
    ValidationError,
)
from app.utils.id_generator import generate_withdrawal_id
from app.utils.validation import (
    normalize_account_number,
    parse_withdrawal_amount,
    validate_account_name,
    validate_telebirr_phone,
)


@dataclass(frozen=True)
class StepResult:
    """
    Outcome of one workflow input.

    Attributes:
        step: Step the user is at after this input
        accepted: False when the input was rejected or ignored
        error: Validation error to show when re-prompting
        request: Created request once the form is submitted
    """

    step: WorkflowStep
    accepted: bool
    error: ValidationError | None = None
    request: WithdrawalRequest | None = None


class WithdrawalWorkflow(BaseService):
    """Withdrawal form state machine."""

    def __init__(
        self,
        session: AsyncSession,
        store: WithdrawalSessionStore,
        notifier: NotificationDispatcher | None = None,
    ) -> None:
        """
        Initialize withdrawal workflow.

        Args:
            session: Database session
            store: Per-user form state storage
            notifier: Admin notification channel
        """
        super().__init__(session)
        self.store = store
        self.notifier = notifier
        self.account_repo = AccountRepository(session)
        self.withdrawal_repo = WithdrawalRequestRepository(session)

    async def begin_withdrawal(
        self, user_id: int, config: ReferralProgramConfig
    ) -> StepResult:
        """
        Start the form if the account is eligible.

        A session already in progress is replaced.

        Raises:
            AccountNotFound: Unknown user
            NotEligible: Referral or balance threshold unmet
        """
        account = await self._load_account(user_id)
        ensure_can_withdraw(account, config)

        state = SelectingMethod()
        await self.store.save(user_id, state)
        self.logger.debug(f"User {user_id} started a withdrawal")
        return StepResult(state.step, True)

    async def select_method(
        self, user_id: int, method: PaymentMethod | str
    ) -> StepResult:
        """Choose telebirr or bankTransfer."""
        current = await self.store.get(user_id)
        if not isinstance(current, SelectingMethod):
            return self._ignored(user_id, current, "method")

        parsed = (
            method
            if isinstance(method, PaymentMethod)
            else PaymentMethod.parse(method)
        )
        if parsed is None:
            return StepResult(current.step, False, InvalidPaymentMethod())

        state = CollectingAmount(method=parsed)
        await self.store.save(user_id, state)
        return StepResult(state.step, True)

    async def submit_amount(
        self, user_id: int, text: str, config: ReferralProgramConfig
    ) -> StepResult:
        """
        Accept the requested amount.

        The amount is checked against the balance as it is now; it is
        checked again when an admin approves.

        Raises:
            InsufficientBalance: Amount exceeds balance, session kept
            AccountNotFound: Account disappeared, session cleared
        """
        current = await self.store.get(user_id)
        if not isinstance(current, CollectingAmount):
            return self._ignored(user_id, current, "amount")

        try:
            amount = parse_withdrawal_amount(
                text, config.min_withdrawal_amount
            )
        except ValidationError as e:
            return StepResult(current.step, False, e)

        account = await self.account_repo.get_by_id(user_id, refresh=True)
        if not account:
            await self.store.clear(user_id)
            raise AccountNotFound(f"Account {user_id} not found")

        if amount > account.balance:
            raise InsufficientBalance(
                balance=account.balance,
                amount=amount,
                message=(
                    f"Insufficient balance. Available: "
                    f"{account.balance} ETB"
                ),
            )

        if current.method == PaymentMethod.TELEBIRR:
            state: WithdrawalSession = CollectingPhone(
                method=current.method, amount=amount
            )
        else:
            state = CollectingAccountNumber(amount=amount)

        await self.store.save(user_id, state)
        return StepResult(state.step, True)

    async def submit_method_detail(
        self, user_id: int, text: str, config: ReferralProgramConfig
    ) -> StepResult:
        """
        Accept the next payout detail for the chosen method.

        Telebirr takes a phone number and submits. Bank transfer takes
        the account number, then the holder name, then submits.

        Raises:
            PersistenceFailure: Request could not be stored, session kept
        """
        current = await self.store.get(user_id)

        try:
            if isinstance(current, CollectingPhone):
                phone = validate_telebirr_phone(text)
                return await self.submit_withdrawal(
                    user_id,
                    current.method,
                    current.amount,
                    {"phone": phone},
                    config,
                )

            if isinstance(current, CollectingAccountNumber):
                state = CollectingAccountName(
                    amount=current.amount,
                    account_number=normalize_account_number(text),
                )
                await self.store.save(user_id, state)
                return StepResult(state.step, True)

            if isinstance(current, CollectingAccountName):
                name = validate_account_name(text)
                return await self.submit_withdrawal(
                    user_id,
                    PaymentMethod.BANK_TRANSFER,
                    current.amount,
                    {
                        "account_number": current.account_number,
                        "account_name": name,
                    },
                    config,
                )
        except ValidationError as e:
            return StepResult(current.step, False, e)

        return self._ignored(user_id, current, "payment detail")

    async def cancel_withdrawal(self, user_id: int) -> StepResult:
        """Drop the form; nothing was persisted yet."""
        current = await self.store.get(user_id)
        await self.store.clear(user_id)
        if current is not None:
            self.logger.info(
                f"User {user_id} cancelled withdrawal at {current.step.value}"
            )
        return StepResult(WorkflowStep.CANCELLED, current is not None)

    async def submit_withdrawal(
        self,
        user_id: int,
        method: PaymentMethod,
        amount: Decimal,
        payment_details: dict[str, Any],
        config: ReferralProgramConfig,
    ) -> StepResult:
        """
        Persist the pending request, notify admins, end the form.

        Only reached from the last detail step of each method.

        Raises:
            AccountNotFound: Account disappeared
            PersistenceFailure: Store error, session kept for a retry
        """
        try:
            account = await self._load_account(user_id)
            # Snapshot before the write so a rollback cannot expire it
            snapshot = {
                "username": account.username,
                "full_name": account.full_name,
                "paid_referrals": account.paid_referrals,
                "balance": account.balance,
            }

            request = await self.withdrawal_repo.create(
                id=generate_withdrawal_id(user_id),
                user_id=user_id,
                amount=amount,
                payment_method=method.value,
                payment_details=payment_details,
                status=WithdrawalStatus.PENDING.value,
            )
            await self.commit()
        except (SQLAlchemyError, DuplicateRecord) as e:
            await self.rollback()
            self.logger.error(
                "Failed to store withdrawal request",
                extra={
                    "user_id": user_id,
                    "amount": str(amount),
                    "method": method.value,
                    "error": str(e),
                },
                exc_info=True,
            )
            raise PersistenceFailure() from e

        await self.store.clear(user_id)

        self.logger.info(
            "Withdrawal request created",
            extra={
                "withdrawal_id": request.id,
                "user_id": user_id,
                "amount": str(amount),
                "method": method.value,
            },
        )

        if self.notifier is not None:
            await self.notifier.notify_admins(
                WithdrawalRequested(
                    withdrawal_id=request.id,
                    user_id=user_id,
                    username=snapshot["username"],
                    full_name=snapshot["full_name"],
                    amount=amount,
                    payment_method=method.value,
                    payment_details=dict(payment_details),
                    paid_referrals=snapshot["paid_referrals"],
                    min_paid_referrals=config.min_paid_referrals,
                    balance=snapshot["balance"],
                )
            )

        return StepResult(WorkflowStep.SUBMITTED, True, request=request)

    async def _load_account(self, user_id: int) -> Account:
        account = await self.account_repo.get_by_id(user_id, refresh=True)
        if not account:
            raise AccountNotFound(f"Account {user_id} not found")
        return account

    def _ignored(
        self,
        user_id: int,
        current: WithdrawalSession | None,
        what: str,
    ) -> StepResult:
        step = current.step if current is not None else WorkflowStep.IDLE
        self.logger.debug(
            f"Ignored {what} input from user {user_id} at step {step.value}"
        )
        return StepResult(step, False)
