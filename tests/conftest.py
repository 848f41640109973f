"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for Settings; the token must match the Telegram format
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "123456789:ABCdefGHIjklMNOpqrsTUVwxyz123456789")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ADMIN_TELEGRAM_IDS", "900001,900002")
os.environ.setdefault("BOT_USERNAME", "jututor_bot")

# Project root on PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from decimal import Decimal  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from aiogram.fsm.storage.memory import MemoryStorage  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.models import Account, Base  # noqa: E402
from app.models.enums import AccountStatus  # noqa: E402
from app.repositories.account_repository import AccountRepository  # noqa: E402
from app.services.referral.config import ReferralProgramConfig  # noqa: E402
from bot.storage import FsmWithdrawalSessionStore  # noqa: E402


TEST_BOT_ID = 42


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )


@pytest_asyncio.fixture
async def db_session(session_maker):
    """Real AsyncSession over the in-memory database."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def referral_config():
    """Default program terms: 30 ETB per referral, 4 referrals, 50 ETB minimum."""
    return ReferralProgramConfig(
        version=1,
        commission_per_referral=Decimal("30"),
        min_paid_referrals=4,
        min_withdrawal_amount=Decimal("50"),
    )


@pytest.fixture
def mock_notifier():
    """Notification dispatcher double."""
    notifier = MagicMock()
    notifier.notify = AsyncMock(return_value=True)
    notifier.notify_admins = AsyncMock(return_value=2)
    return notifier


@pytest.fixture
def fsm_storage():
    return MemoryStorage()


@pytest.fixture
def session_store(fsm_storage):
    """Withdrawal session store over in-memory FSM storage."""
    return FsmWithdrawalSessionStore(fsm_storage, TEST_BOT_ID)


@pytest.fixture
def mock_bot():
    """Mock Telegram Bot."""
    bot = AsyncMock()
    bot.id = TEST_BOT_ID
    bot.send_message = AsyncMock()
    bot.session = AsyncMock()
    bot.session.close = AsyncMock()
    return bot


@pytest.fixture
def make_account(db_session):
    """
    Factory inserting a committed Account.

    Usage:
        account = await make_account(1001, balance=Decimal("300"), paid_referrals=4)

    Ledger fields are kept consistent: total_earned defaults to
    balance + total_withdrawn.
    """

    async def _make(account_id: int, **fields) -> Account:
        balance = Decimal(fields.pop("balance", "0"))
        total_withdrawn = Decimal(fields.pop("total_withdrawn", "0"))
        paid = fields.pop("paid_referrals", 0)
        unpaid = fields.pop("unpaid_referrals", 0)
        values = {
            "id": account_id,
            "full_name": f"Student {account_id}",
            "username": f"student{account_id}",
            "status": AccountStatus.ACTIVE.value,
            "referral_code": f"TST{account_id}",
            "balance": balance,
            "total_withdrawn": total_withdrawn,
            "total_earned": Decimal(
                fields.pop("total_earned", balance + total_withdrawn)
            ),
            "paid_referrals": paid,
            "unpaid_referrals": unpaid,
            "total_referrals": fields.pop("total_referrals", paid + unpaid),
        }
        values.update(fields)
        account = await AccountRepository(db_session).create(**values)
        await db_session.commit()
        return account

    return _make
