"""
staffboard.models.database - Engine and Session Factory

The API lifespan builds one engine and session factory per process
(see staffboard.api.main); the CLI uses init_db for development databases.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from staffboard.models.base import Base
from staffboard.settings import get_settings

POOL_SIZE = 10
MAX_OVERFLOW = 20


def get_engine(database_url: str | None = None, echo: bool | None = None) -> AsyncEngine:
    """
    Create the asyncpg engine.

    Args:
        database_url: Connection string (defaults to settings.database_url)
        echo: Log emitted SQL (defaults to settings.database_echo)
    """
    settings = get_settings()
    return create_async_engine(
        database_url or settings.database_url,
        echo=settings.database_echo if echo is None else echo,
        pool_pre_ping=True,
        pool_size=POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
    )


def get_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Loaded rows stay readable after commit; actions serialize them afterwards
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(database_url: str | None = None) -> None:
    """
    Create all tables directly from the ORM metadata.

    Development only; other environments are migrated with Alembic.
    """
    # Register every table on Base.metadata
    import staffboard.models  # noqa: F401

    engine = get_engine(database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()
