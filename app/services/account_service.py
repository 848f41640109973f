"""
Account service.

Registration completion, payment review and account status changes.
"""

from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import (
    REFERRAL_CODE_FALLBACK_PREFIX,
    REFERRAL_CODE_MAX_ATTEMPTS,
)
from app.models.account import Account
from app.models.enums import AccountStatus
from app.repositories.account_repository import AccountRepository
from app.services.base_service import BaseService, log_operation, transaction
from app.services.notification.dispatcher import NotificationDispatcher
from app.services.notification.payloads import PaymentRejected
from app.utils.exceptions import (
    AccountNotFound,
    AlreadyProcessed,
    DuplicateRecord,
)
from app.utils.id_generator import generate_referral_code


class AccountService(BaseService):
    """Account lifecycle operations."""

    def __init__(
        self,
        session: AsyncSession,
        notifier: NotificationDispatcher | None = None,
    ) -> None:
        """
        Initialize account service.

        Args:
            session: Database session
            notifier: Delivers payment review notices to students
        """
        super().__init__(session)
        self.notifier = notifier
        self.account_repo = AccountRepository(session)

    async def get_account(self, account_id: int) -> Account | None:
        return await self.account_repo.get_by_id(account_id)

    async def get_pending_payment_accounts(
        self, limit: int | None = None
    ) -> list[Account]:
        """Accounts whose registration payment is not approved yet, oldest first."""
        return await self.account_repo.find_all(
            limit=limit,
            order_by="created_at",
            status=AccountStatus.PENDING.value,
        )

    @log_operation
    @transaction
    async def create_account(
        self,
        account_id: int,
        full_name: str | None = None,
        username: str | None = None,
    ) -> Account:
        """
        Create an account with all ledger fields and counters at zero.

        A referral code taken by a concurrent registration between the
        availability check and the insert is replaced by the id-based code.

        Args:
            account_id: Telegram user ID
            full_name: Name used to derive the referral code
            username: Telegram username

        Returns:
            Created account

        Raises:
            DuplicateRecord: Account already exists
        """
        existing = await self.account_repo.get_by_id(account_id)
        if existing:
            raise DuplicateRecord(f"Account {account_id} already exists")

        referral_code = await self._unique_referral_code(account_id, full_name)

        try:
            account = await self._insert_account(
                account_id, full_name, username, referral_code
            )
        except DuplicateRecord:
            await self.rollback()
            if await self.account_repo.get_by_id(account_id):
                raise

            self.logger.warning(
                f"Referral code {referral_code} taken concurrently, "
                f"using id-based code for {account_id}"
            )
            referral_code = f"{REFERRAL_CODE_FALLBACK_PREFIX}{account_id}"
            account = await self._insert_account(
                account_id, full_name, username, referral_code
            )

        self.logger.info(
            "Account created",
            extra={
                "account_id": account_id,
                "referral_code": referral_code,
            },
        )
        return account

    async def _insert_account(
        self,
        account_id: int,
        full_name: str | None,
        username: str | None,
        referral_code: str,
    ) -> Account:
        return await self.account_repo.create(
            id=account_id,
            username=username,
            full_name=full_name,
            status=AccountStatus.PENDING.value,
            referral_code=referral_code,
        )

    async def _unique_referral_code(
        self, account_id: int, full_name: str | None
    ) -> str:
        for _ in range(REFERRAL_CODE_MAX_ATTEMPTS):
            code = generate_referral_code(full_name)
            if not await self.account_repo.get_by_referral_code(code):
                return code

        # Name prefix exhausted; the Telegram id keeps this one unique
        self.logger.warning(
            f"Referral code space exhausted for {full_name!r}, "
            f"using id-based code"
        )
        return f"{REFERRAL_CODE_FALLBACK_PREFIX}{account_id}"

    @transaction
    async def approve_payment(self, account_id: int) -> Account:
        """
        Activate an account whose registration payment was verified.

        Only pending accounts are approved; blocked and already active
        accounts are left alone.

        Raises:
            AccountNotFound: Account does not exist
            AlreadyProcessed: Account is not awaiting payment approval
        """
        account = await self.account_repo.transition_status(
            account_id,
            AccountStatus.PENDING,
            AccountStatus.ACTIVE,
            activated_at=datetime.now(UTC),
        )
        if account is None:
            await self._get_pending(account_id)
            raise AlreadyProcessed(
                f"Account {account_id} is no longer awaiting payment approval"
            )

        self.logger.info(f"Registration payment of {account_id} approved")
        return account

    async def reject_payment(self, account_id: int, reason: str) -> Account:
        """
        Reject a registration payment and tell the student why.

        The account stays pending so the student can send a new proof
        of payment.

        Args:
            account_id: Account whose payment was reviewed
            reason: Free text shown to the student

        Returns:
            The still pending account

        Raises:
            AccountNotFound: Account does not exist
            AlreadyProcessed: Account is not awaiting payment approval
        """
        account = await self._get_pending(account_id)
        reason = (reason or "").strip() or "No reason given"

        self.logger.info(
            "Registration payment rejected",
            extra={"account_id": account_id, "reason": reason},
        )

        if self.notifier is not None:
            await self.notifier.notify(
                account_id, PaymentRejected(user_id=account_id, reason=reason)
            )
        return account

    async def _get_pending(self, account_id: int) -> Account:
        account = await self.account_repo.get_by_id(account_id, refresh=True)
        if not account:
            raise AccountNotFound(f"Account {account_id} not found")
        if account.status != AccountStatus.PENDING.value:
            raise AlreadyProcessed(
                f"Account {account_id} is {account.status}, "
                f"not awaiting payment approval"
            )
        return account

    async def block_account(self, account_id: int) -> Account:
        """
        Block an account. Blocked users are ignored by the bot.

        Raises:
            AccountNotFound: Account does not exist
        """
        return await self.set_status(account_id, AccountStatus.BLOCKED)

    async def unblock_account(self, account_id: int) -> Account:
        """
        Lift a block.

        Accounts whose payment was approved before the block become
        active again; the others go back to awaiting payment approval.

        Raises:
            AccountNotFound: Account does not exist
        """
        account = await self.account_repo.get_by_id(account_id, refresh=True)
        if not account:
            raise AccountNotFound(f"Account {account_id} not found")
        if not account.is_blocked:
            return account

        restored = (
            AccountStatus.ACTIVE
            if account.activated_at is not None
            else AccountStatus.PENDING
        )
        return await self.set_status(account_id, restored)

    @transaction
    async def set_status(
        self, account_id: int, status: AccountStatus
    ) -> Account:
        """
        Overwrite account status.

        Args:
            account_id: Account ID
            status: New status

        Returns:
            Updated account

        Raises:
            AccountNotFound: Account does not exist
        """
        account = await self.account_repo.update(
            account_id, status=status.value
        )
        if not account:
            raise AccountNotFound(f"Account {account_id} not found")

        self.logger.info(f"Account {account_id} status -> {status.value}")
        return account
