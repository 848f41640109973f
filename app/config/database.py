"""
Database configuration.

Async SQLAlchemy engine and session factory shared by the bot.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.config.settings import settings


def create_engine(url: str | None = None, echo: bool | None = None) -> AsyncEngine:
    """
    Create async engine.

    Args:
        url: Database URL (defaults to settings.database_url)
        echo: Echo SQL statements (defaults to settings.database_echo)

    Returns:
        Configured async engine
    """
    database_url = url or settings.database_url
    options: dict = {
        "echo": settings.database_echo if echo is None else echo,
        "pool_pre_ping": True,
    }
    if not database_url.startswith("sqlite"):
        options.update(pool_size=10, max_overflow=20)
    return create_async_engine(database_url, **options)


engine = create_engine()

async_session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
