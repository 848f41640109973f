"""
Pending referral repository.

Data access layer for PendingReferral model.
"""

from datetime import UTC, datetime

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import ReferralStatus
from app.models.pending_referral import PendingReferral
from app.repositories.base import BaseRepository


class PendingReferralRepository(BaseRepository[PendingReferral]):
    """Pending referral repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize pending referral repository."""
        super().__init__(PendingReferral, session)

    async def get_by_referred_user(
        self, referred_user_id: int
    ) -> PendingReferral | None:
        """
        Get the referral record of an invited user.

        Args:
            referred_user_id: Invited account ID

        Returns:
            PendingReferral or None
        """
        return await self.get_by(referred_user_id=referred_user_id)

    async def mark_converted(
        self, referrer_id: int, referred_user_id: int
    ) -> bool:
        """
        Mark a pending referral as converted.

        Args:
            referrer_id: Referrer account ID
            referred_user_id: Invited account ID

        Returns:
            True if a pending record was converted
        """
        stmt = (
            update(PendingReferral)
            .where(
                PendingReferral.referrer_id == referrer_id,
                PendingReferral.referred_user_id == referred_user_id,
                PendingReferral.status == ReferralStatus.PENDING.value,
            )
            .values(
                status=ReferralStatus.CONVERTED.value,
                converted_at=datetime.now(UTC),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
