"""
Account repository.

Data access layer for Account model.
All balance and counter writes are single atomic UPDATE statements.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import case
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.account import Account
from app.models.enums import AccountStatus
from app.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """Account repository with ledger mutations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize account repository."""
        super().__init__(Account, session)

    async def get_by_referral_code(
        self, referral_code: str
    ) -> Account | None:
        """
        Get account by referral code.

        Args:
            referral_code: Invite code (case-insensitive)

        Returns:
            Account or None
        """
        return await self.get_by(referral_code=referral_code.strip().upper())

    async def apply_commission(
        self, account_id: int, commission: Decimal
    ) -> Account | None:
        """
        Credit a converted referral to the referrer.

        balance += c, total_earned += c, paid_referrals += 1,
        unpaid_referrals = max(0, unpaid_referrals - 1). When there was no
        unpaid referral to convert, total_referrals grows so it keeps
        covering paid + unpaid.

        Args:
            account_id: Referrer account ID
            commission: Amount to credit

        Returns:
            Fresh account or None if it does not exist
        """
        has_unpaid = Account.unpaid_referrals > 0
        values = {
            "balance": Account.balance + commission,
            "total_earned": Account.total_earned + commission,
            "paid_referrals": Account.paid_referrals + 1,
            "unpaid_referrals": case(
                (has_unpaid, Account.unpaid_referrals - 1), else_=0
            ),
            "total_referrals": case(
                (has_unpaid, Account.total_referrals),
                else_=Account.total_referrals + 1,
            ),
        }
        return await self._conditional_update(
            Account.id == account_id, account_id, values
        )

    async def record_pending_referral(
        self, account_id: int
    ) -> Account | None:
        """
        Count a newly joined, not yet paid referral.

        Args:
            account_id: Referrer account ID

        Returns:
            Fresh account or None if it does not exist
        """
        return await self.increment(
            account_id, unpaid_referrals=1, total_referrals=1
        )

    async def apply_withdrawal(
        self, account_id: int, amount: Decimal
    ) -> Account | None:
        """
        Debit an approved withdrawal.

        Only applies when balance >= amount at the moment of the UPDATE,
        so a stale approval can never drive the balance negative.

        Args:
            account_id: Account ID
            amount: Amount paid out

        Returns:
            Fresh account, or None if missing or the balance is too low
        """
        values = {
            "balance": Account.balance - amount,
            "total_withdrawn": Account.total_withdrawn + amount,
        }
        return await self._conditional_update(
            (Account.id == account_id) & (Account.balance >= amount),
            account_id,
            values,
        )

    async def transition_status(
        self,
        account_id: int,
        from_status: AccountStatus,
        to_status: AccountStatus,
        **values: Any,
    ) -> Account | None:
        """
        Move an account between statuses only if it is still in from_status.

        Args:
            account_id: Account ID
            from_status: Required current status
            to_status: New status
            **values: Extra columns written in the same UPDATE

        Returns:
            Fresh account, or None if missing or in another status
        """
        return await self._conditional_update(
            (Account.id == account_id)
            & (Account.status == from_status.value),
            account_id,
            {"status": to_status.value, **values},
        )
