"""
ReferralCommission model.

One record per converted referral; created once, never updated.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import ReferralStatus
from app.models.types import MoneyType


class ReferralCommission(Base):
    """
    ReferralCommission entity.

    The (referrer_id, referred_user_id) unique constraint is the guard
    against crediting the same referral twice.

    Attributes:
        id: REF_<referrer>_<referred>_<ms>
        referrer_id: Account credited with the commission
        referred_user_id: Account whose payment was approved
        status: Always "completed"
        commission_amount: Amount credited (fixed at creation)
        created_at: Creation timestamp
    """

    __tablename__ = "referral_commissions"
    __table_args__ = (
        UniqueConstraint(
            "referrer_id",
            "referred_user_id",
            name="uq_referral_commissions_pair",
        ),
    )

    id: Mapped[str] = mapped_column(String(80), primary_key=True)

    referrer_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    referred_user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status: Mapped[str] = mapped_column(
        String(20), default=ReferralStatus.COMPLETED.value, nullable=False
    )
    commission_amount: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ReferralCommission(id={self.id}, referrer_id={self.referrer_id}, "
            f"referred_user_id={self.referred_user_id}, "
            f"amount={self.commission_amount})>"
        )
