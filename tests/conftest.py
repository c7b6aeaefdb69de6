from datetime import UTC, datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from decklimit.db.database import get_session
from decklimit.main import app
from decklimit.models.catalog import InMemoryPriceCatalog, PriceCatalogEntry
from decklimit.models.db import Base
from decklimit.models.money import Money


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncSession:
    """Provide a database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 9, 12, 0, tzinfo=UTC)


@pytest.fixture
def sample_catalog() -> InMemoryPriceCatalog:
    """A small price catalog keyed by normalized id."""
    return InMemoryPriceCatalog(
        [
            PriceCatalogEntry(id="lightningbolt", name="Lightning Bolt", price=Money("1.50")),
            PriceCatalogEntry(id="counterspell", name="Counterspell", price=Money("0.25")),
            PriceCatalogEntry(
                id="jacethemindsculptor", name="Jace, the Mind Sculptor", price=Money("89.99")
            ),
            PriceCatalogEntry(id="solring", name="Sol Ring", price=Money("2.00")),
        ]
    )


@pytest.fixture
def sample_decklist() -> str:
    """Sample decklist as typed by a user."""
    return "4 lightning bolt\r\n4x COUNTERSPELL\r\n\r\n20 Island\r\nSol Ring\r\n"


@pytest.fixture
async def client(session_factory):
    """Provide an async test client with overridden database session."""

    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
