"""
Account model.

Represents a registered student and their referral ledger.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import AccountStatus
from app.models.types import MoneyType


class Account(Base):
    """
    Account entity - one per registered Telegram user.

    Ledger invariant: balance == total_earned - total_withdrawn.
    Balance-affecting fields are only written through atomic
    increments in AccountRepository.

    Attributes:
        id: Telegram user ID
        username: Telegram username
        full_name: Name given at registration
        status: pending, active or blocked
        balance: Current withdrawable amount (ETB)
        total_earned: Lifetime commission credited
        total_withdrawn: Lifetime amount paid out
        paid_referrals: Referrals whose registration payment was approved
        unpaid_referrals: Referrals still awaiting payment
        total_referrals: paid + unpaid, never decreases
        referral_code: Unique code used in invite links
        referred_by_id: Account that invited this user
    """

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint(
            'balance >= 0', name='check_account_balance_non_negative'
        ),
        CheckConstraint(
            'total_earned >= 0',
            name='check_account_total_earned_non_negative'
        ),
        CheckConstraint(
            'total_withdrawn >= 0',
            name='check_account_total_withdrawn_non_negative'
        ),
        CheckConstraint(
            'paid_referrals >= 0 AND unpaid_referrals >= 0',
            name='check_account_referral_counters_non_negative'
        ),
        CheckConstraint(
            'total_referrals >= paid_referrals',
            name='check_account_total_referrals_covers_paid'
        ),
    )

    # Telegram user ID doubles as primary key
    id: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False
    )

    # Profile (collected by the registration flow)
    username: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )
    full_name: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )

    status: Mapped[str] = mapped_column(
        String(20),
        default=AccountStatus.PENDING.value,
        nullable=False,
        index=True,
    )

    # Ledger
    balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    total_earned: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    total_withdrawn: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Referral counters
    paid_referrals: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    unpaid_referrals: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    total_referrals: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )

    referral_code: Mapped[str] = mapped_column(
        String(20), nullable=False, unique=True, index=True
    )
    referred_by_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Set when the registration payment is approved
    activated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False
    )

    @property
    def is_active(self) -> bool:
        """Registration payment approved and not blocked."""
        return self.status == AccountStatus.ACTIVE.value

    @property
    def is_blocked(self) -> bool:
        return self.status == AccountStatus.BLOCKED.value

    @property
    def ledger_consistent(self) -> bool:
        """Check balance == total_earned - total_withdrawn."""
        return self.balance == self.total_earned - self.total_withdrawn

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Account(id={self.id}, status={self.status}, "
            f"balance={self.balance}, paid_referrals={self.paid_referrals})>"
        )
