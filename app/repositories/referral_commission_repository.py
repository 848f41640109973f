"""
Referral commission repository.

Data access layer for ReferralCommission model.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.referral_commission import ReferralCommission
from app.repositories.base import BaseRepository


class ReferralCommissionRepository(BaseRepository[ReferralCommission]):
    """Referral commission repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral commission repository."""
        super().__init__(ReferralCommission, session)

    async def get_for_pair(
        self, referrer_id: int, referred_user_id: int
    ) -> ReferralCommission | None:
        """
        Get the commission for a referrer/referred pair.

        Args:
            referrer_id: Referrer account ID
            referred_user_id: Referred account ID

        Returns:
            Commission or None
        """
        return await self.get_by(
            referrer_id=referrer_id, referred_user_id=referred_user_id
        )

    async def get_by_referrer(
        self, referrer_id: int
    ) -> list[ReferralCommission]:
        """
        Get commissions earned by a referrer, oldest first.

        Args:
            referrer_id: Referrer account ID

        Returns:
            List of commissions
        """
        return await self.find_by(
            order_by="created_at", referrer_id=referrer_id
        )

    async def total_for_referrer(self, referrer_id: int) -> Decimal:
        """Sum of commissions recorded for a referrer."""
        stmt = select(
            func.coalesce(
                func.sum(ReferralCommission.commission_amount), 0
            )
        ).where(ReferralCommission.referrer_id == referrer_id)
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))
