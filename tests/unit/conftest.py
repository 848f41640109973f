"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- Transient Account objects (never attached to a session)
- Mock database session
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from app.models.account import Account


@pytest.fixture
def mock_session():
    """
    Mock async database session.

    Returns:
        AsyncMock: Mocked async session for database operations
    """
    return AsyncMock()


@pytest.fixture
def account_factory():
    """
    Build a transient Account with ledger defaults.

    Default values:
    - balance, total_earned, total_withdrawn: 0
    - paid / unpaid / total referrals: 0

    Returns:
        Callable returning an Account
    """

    def _build(**fields) -> Account:
        values = {
            "id": 1001,
            "full_name": "Abebe Kebede",
            "username": "abebe",
            "status": "active",
            "referral_code": "ABE123",
            "balance": Decimal("0"),
            "total_earned": Decimal("0"),
            "total_withdrawn": Decimal("0"),
            "paid_referrals": 0,
            "unpaid_referrals": 0,
            "total_referrals": 0,
        }
        values.update(fields)
        return Account(**values)

    return _build
