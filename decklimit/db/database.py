"""
Database engine and session management.

The price catalog and scraper stats live here. Readers get sessions through
``get_session``; the scraper writes through ``transaction`` so a catalog
replacement is committed as one unit or not at all.
"""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from decklimit.config import settings
from decklimit.models.db import Base

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session.

    Commits when the request handler returns, rolls back on database errors.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise


@asynccontextmanager
async def transaction(
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> AsyncIterator[AsyncSession]:
    """
    Session whose work is committed on exit and rolled back on any error.

    Readers never observe a half-applied change made inside the block.
    """
    async with session_factory() as session, session.begin():
        yield session


async def init_db() -> None:
    """Create the price catalog and scraper stats tables if missing."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
