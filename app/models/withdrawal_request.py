"""
WithdrawalRequest model.

A user's claim against accrued balance, resolved by an admin.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import PaymentMethod, WithdrawalStatus
from app.models.types import MoneyType


class WithdrawalRequest(Base):
    """
    WithdrawalRequest entity.

    The amount is NOT deducted while the request is pending; the debit
    happens on approval.

    Attributes:
        id: WD_<user>_<ms>
        user_id: Requesting account
        amount: Requested amount (ETB)
        payment_method: telebirr or bankTransfer
        payment_details: {"phone": ...} or {"account_number": ..., "account_name": ...}
        status: pending, approved or rejected
        requested_at: Submission time
        processed_at: Approval/rejection time
        processed_by: Admin Telegram ID
        rejection_reason: Free text given on rejection
    """

    __tablename__ = "withdrawal_requests"
    __table_args__ = (
        CheckConstraint('amount > 0', name='check_withdrawal_amount_positive'),
        Index("idx_withdrawal_requests_status_requested", "status", "requested_at"),
    )

    id: Mapped[str] = mapped_column(String(80), primary_key=True)

    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    payment_details: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )

    status: Mapped[str] = mapped_column(
        String(20),
        default=WithdrawalStatus.PENDING.value,
        nullable=False,
    )

    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    processed_by: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def is_pending(self) -> bool:
        return self.status == WithdrawalStatus.PENDING.value

    @property
    def method(self) -> PaymentMethod | None:
        return PaymentMethod.parse(self.payment_method)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<WithdrawalRequest(id={self.id}, user_id={self.user_id}, "
            f"amount={self.amount}, status={self.status})>"
        )
