"""
Referral service.

Join-time attribution, the payment-approval side channel into the
commission engine, and referral summaries for the bot.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.account import Account
from app.models.pending_referral import PendingReferral
from app.models.referral_commission import ReferralCommission
from app.repositories.account_repository import AccountRepository
from app.repositories.pending_referral_repository import (
    PendingReferralRepository,
)
from app.repositories.referral_commission_repository import (
    ReferralCommissionRepository,
)
from app.services.base_service import BaseService, transaction
from app.services.notification.dispatcher import NotificationDispatcher
from app.services.referral.commission_engine import ReferralCommissionEngine
from app.services.referral.config import ReferralProgramConfig
from app.services.referral.eligibility import EligibilityResult, can_withdraw
from app.utils.exceptions import (
    AccountNotFound,
    DuplicateCommission,
    PersistenceFailure,
    ValidationError,
)


@dataclass(frozen=True)
class ReferralSummary:
    """Snapshot of an account's referral standing."""

    account_id: int
    referral_code: str
    balance: Decimal
    total_earned: Decimal
    total_withdrawn: Decimal
    paid_referrals: int
    unpaid_referrals: int
    total_referrals: int
    eligibility: EligibilityResult
    commission_per_referral: Decimal
    min_paid_referrals: int
    min_withdrawal_amount: Decimal
    commissions: list[ReferralCommission] = field(default_factory=list)


class ReferralService(BaseService):
    """Referral attribution and reporting."""

    def __init__(
        self,
        session: AsyncSession,
        notifier: NotificationDispatcher | None = None,
    ) -> None:
        """
        Initialize referral service.

        Args:
            session: Database session
            notifier: Passed to the commission engine
        """
        super().__init__(session)
        self.account_repo = AccountRepository(session)
        self.pending_repo = PendingReferralRepository(session)
        self.commission_repo = ReferralCommissionRepository(session)
        self.engine = ReferralCommissionEngine(session, notifier)

    @transaction
    async def register_referral(
        self, referral_code: str, referred_user_id: int
    ) -> PendingReferral | None:
        """
        Attribute a newly joined user to the owner of a referral code.

        Unknown codes, self-referral and already-referred users are
        ignored (None). Otherwise a PendingReferral is written and the
        referrer's unpaid and total counters grow by one.

        Args:
            referral_code: Code from the invite link
            referred_user_id: Account that just joined

        Returns:
            Created PendingReferral or None

        Raises:
            AccountNotFound: Joining account does not exist
        """
        referred = await self.account_repo.get_by_id(referred_user_id)
        if not referred:
            raise AccountNotFound(f"Account {referred_user_id} not found")

        referrer = await self.account_repo.get_by_referral_code(referral_code)
        if not referrer:
            self.logger.info(f"Unknown referral code {referral_code!r}")
            return None

        if referrer.id == referred_user_id:
            self.logger.info(f"User {referred_user_id} used their own code")
            return None

        if referred.referred_by_id is not None or (
            await self.pending_repo.get_by_referred_user(referred_user_id)
        ):
            self.logger.info(
                f"User {referred_user_id} already has a referrer, "
                f"code {referral_code!r} ignored"
            )
            return None

        pending = await self.pending_repo.create(
            referrer_id=referrer.id, referred_user_id=referred_user_id
        )
        await self.account_repo.update(
            referred_user_id, referred_by_id=referrer.id
        )
        await self.account_repo.record_pending_referral(referrer.id)

        self.logger.info(
            "Referral registered",
            extra={
                "referrer_id": referrer.id,
                "referred_user_id": referred_user_id,
                "referral_code": referrer.referral_code,
            },
        )
        return pending

    async def handle_referred_payment_approved(
        self, referred_user_id: int, config: ReferralProgramConfig
    ) -> ReferralCommission | None:
        """
        Credit the referrer of a user whose payment was just approved.

        Best-effort: failures are logged and swallowed so the payment
        approval itself is never blocked.

        Args:
            referred_user_id: Account whose payment was approved
            config: Referral program terms

        Returns:
            Commission record, or None when nothing was credited
        """
        if not config.referrals_enabled:
            self.logger.info(
                f"Referrals disabled (config v{config.version}), "
                f"no commission for user {referred_user_id}"
            )
            return None

        try:
            referred = await self.account_repo.get_by_id(referred_user_id)
        except SQLAlchemyError as e:
            await self.rollback()
            self.logger.error(
                f"Commission lookup for user {referred_user_id} failed, "
                f"needs reconciliation",
                extra={"referred_user_id": referred_user_id, "error": str(e)},
                exc_info=True,
            )
            return None
        if not referred or referred.referred_by_id is None:
            return None

        referrer_id = referred.referred_by_id
        try:
            return await self.engine.credit_referral_commission(
                referrer_id, referred_user_id, config
            )
        except (AccountNotFound, DuplicateCommission, ValidationError) as e:
            self.logger.warning(
                f"Commission not credited: {type(e).__name__}: {e.message}",
                extra={
                    "referrer_id": referrer_id,
                    "referred_user_id": referred_user_id,
                },
            )
        except PersistenceFailure:
            self.logger.error(
                f"Commission for user {referred_user_id} lost to a "
                f"store failure, needs reconciliation"
            )
        return None

    async def get_referral_summary(
        self, account_id: int, config: ReferralProgramConfig
    ) -> ReferralSummary:
        """
        Build the referral dashboard for an account.

        Raises:
            AccountNotFound: Account does not exist
        """
        account = await self.account_repo.get_by_id(account_id, refresh=True)
        if not account:
            raise AccountNotFound(f"Account {account_id} not found")

        commissions = await self.commission_repo.get_by_referrer(account_id)
        return self._summarize(account, commissions, config)

    @staticmethod
    def _summarize(
        account: Account,
        commissions: list[ReferralCommission],
        config: ReferralProgramConfig,
    ) -> ReferralSummary:
        return ReferralSummary(
            account_id=account.id,
            referral_code=account.referral_code,
            balance=account.balance,
            total_earned=account.total_earned,
            total_withdrawn=account.total_withdrawn,
            paid_referrals=account.paid_referrals,
            unpaid_referrals=account.unpaid_referrals,
            total_referrals=account.total_referrals,
            eligibility=can_withdraw(account, config),
            commission_per_referral=config.commission_per_referral,
            min_paid_referrals=config.min_paid_referrals,
            min_withdrawal_amount=config.min_withdrawal_amount,
            commissions=commissions,
        )
