"""
Referral commission engine.

Credits a referrer when a referred user's registration payment is
approved. The commission record is written before the balance moves,
so a failure between the two can leave an uncredited record (detectable)
but never a credited balance without a record.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.account import Account
from app.models.enums import ReferralStatus
from app.models.referral_commission import ReferralCommission
from app.repositories.account_repository import AccountRepository
from app.repositories.pending_referral_repository import (
    PendingReferralRepository,
)
from app.repositories.referral_commission_repository import (
    ReferralCommissionRepository,
)
from app.services.base_service import BaseService
from app.services.notification.dispatcher import NotificationDispatcher
from app.services.notification.payloads import CommissionCredited
from app.services.referral.config import ReferralProgramConfig
from app.utils.exceptions import (
    AccountNotFound,
    DuplicateCommission,
    DuplicateRecord,
    PersistenceFailure,
    ValidationError,
)
from app.utils.id_generator import generate_commission_id


class ReferralCommissionEngine(BaseService):
    """Creates commission records and credits referrer balances."""

    def __init__(
        self,
        session: AsyncSession,
        notifier: NotificationDispatcher | None = None,
    ) -> None:
        """
        Initialize commission engine.

        Args:
            session: Database session
            notifier: Delivers the credit notice to the referrer
        """
        super().__init__(session)
        self.notifier = notifier
        self.account_repo = AccountRepository(session)
        self.commission_repo = ReferralCommissionRepository(session)
        self.pending_repo = PendingReferralRepository(session)

    async def credit_referral_commission(
        self,
        referrer_id: int,
        referred_user_id: int,
        config: ReferralProgramConfig,
    ) -> ReferralCommission:
        """
        Credit one converted referral.

        Args:
            referrer_id: Inviting account
            referred_user_id: Account whose payment was just approved
            config: Referral program terms

        Returns:
            Created commission record

        Raises:
            ValidationError: Self-referral
            AccountNotFound: Referrer or referred account missing
            DuplicateCommission: Pair already credited
            PersistenceFailure: Store error, nothing committed
        """
        if referrer_id == referred_user_id:
            raise ValidationError("A user cannot refer themselves")

        commission_amount = config.commission_per_referral

        try:
            await self._load_account(referrer_id, "referrer")
            await self._load_account(referred_user_id, "referred user")
            await self._ensure_not_credited(referrer_id, referred_user_id)

            commission = await self._write_commission(
                referrer_id, referred_user_id, config
            )
            referrer = await self.account_repo.apply_commission(
                referrer_id, commission_amount
            )
            if referrer is None:
                # Deleted between the load and the UPDATE
                await self.rollback()
                self.logger.warning(
                    f"Referrer {referrer_id} vanished before credit, "
                    f"commission abandoned"
                )
                raise AccountNotFound(f"Referrer {referrer_id} not found")

            await self.pending_repo.mark_converted(
                referrer_id, referred_user_id
            )
            await self.commit()
        except SQLAlchemyError as e:
            await self.rollback()
            self.logger.error(
                "Failed to credit referral commission",
                extra={
                    "referrer_id": referrer_id,
                    "referred_user_id": referred_user_id,
                    "amount": str(commission_amount),
                    "config_version": config.version,
                    "error": str(e),
                },
                exc_info=True,
            )
            raise PersistenceFailure() from e

        self.logger.info(
            "Referral commission credited",
            extra={
                "commission_id": commission.id,
                "referrer_id": referrer_id,
                "referred_user_id": referred_user_id,
                "amount": str(commission_amount),
                "new_balance": str(referrer.balance),
                "paid_referrals": referrer.paid_referrals,
            },
        )

        await self._notify_referrer(commission, referrer, config)
        return commission

    async def _load_account(self, account_id: int, role: str) -> Account:
        account = await self.account_repo.get_by_id(account_id)
        if not account:
            self.logger.warning(
                f"Commission skipped: {role} {account_id} not found"
            )
            raise AccountNotFound(f"Account {account_id} not found")
        return account

    async def _ensure_not_credited(
        self, referrer_id: int, referred_user_id: int
    ) -> None:
        existing = await self.commission_repo.get_for_pair(
            referrer_id, referred_user_id
        )
        if existing:
            self.logger.warning(
                "Commission already credited for referral pair",
                extra={
                    "referrer_id": referrer_id,
                    "referred_user_id": referred_user_id,
                    "commission_id": existing.id,
                },
            )
            raise DuplicateCommission()

    async def _write_commission(
        self,
        referrer_id: int,
        referred_user_id: int,
        config: ReferralProgramConfig,
    ) -> ReferralCommission:
        """Insert the commission record; the pair constraint guards races."""
        try:
            return await self.commission_repo.create(
                id=generate_commission_id(referrer_id, referred_user_id),
                referrer_id=referrer_id,
                referred_user_id=referred_user_id,
                status=ReferralStatus.COMPLETED.value,
                commission_amount=config.commission_per_referral,
            )
        except DuplicateRecord as e:
            await self.rollback()
            self.logger.warning(
                "Concurrent commission for referral pair rejected",
                extra={
                    "referrer_id": referrer_id,
                    "referred_user_id": referred_user_id,
                },
            )
            raise DuplicateCommission() from e

    async def _notify_referrer(
        self,
        commission: ReferralCommission,
        referrer: Account,
        config: ReferralProgramConfig,
    ) -> None:
        if self.notifier is None:
            return
        payload = CommissionCredited(
            referrer_id=referrer.id,
            referred_user_id=commission.referred_user_id,
            commission_id=commission.id,
            amount=commission.commission_amount,
            new_balance=referrer.balance,
            paid_referrals=referrer.paid_referrals,
            min_paid_referrals=config.min_paid_referrals,
        )
        await self.notifier.notify(referrer.id, payload)
