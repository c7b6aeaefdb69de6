"""Tests for health check endpoints."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from decklimit.db.database import get_session, transaction
from decklimit.db.operations import replace_all_prices
from decklimit.main import app
from decklimit.models.catalog import PriceCatalogEntry
from decklimit.models.money import Money


@pytest.fixture
def running_scheduler():
    """Attach a fake scheduler the way the app lifespan does."""
    scheduler = MagicMock(is_running=True, scrape_in_flight=False)
    app.state.price_scheduler = scheduler
    yield scheduler
    del app.state.price_scheduler


class TestHealthEndpoint:
    async def test_health_returns_healthy(self, client: AsyncClient) -> None:
        """Liveness probe returns healthy."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "database" not in data

    async def test_scheduler_not_started(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.json()["scheduler"] == "stopped"

    async def test_scheduler_states(
        self, client: AsyncClient, running_scheduler: MagicMock
    ) -> None:
        response = await client.get("/health")
        assert response.json()["scheduler"] == "running"

        running_scheduler.scrape_in_flight = True
        response = await client.get("/health")
        assert response.json()["scheduler"] == "scraping"


class TestReadyEndpoint:
    async def test_ready_with_empty_catalog(self, client: AsyncClient) -> None:
        """Readiness probe returns ready when DB is connected."""
        response = await client.get("/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["database"] == "connected"
        assert data["card_count"] == 0

    async def test_ready_reports_card_count(
        self, client: AsyncClient, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        async with transaction(session_factory) as session:
            await replace_all_prices(
                session, [PriceCatalogEntry(id="opt", name="Opt", price=Money("0.10"))]
            )

        response = await client.get("/ready")

        assert response.json()["card_count"] == 1

    async def test_ready_returns_503_on_db_failure(self) -> None:
        """Readiness probe returns 503 when DB is unavailable."""

        async def override_get_session_broken():
            mock_session = AsyncMock()
            mock_session.execute.side_effect = OperationalError(
                "SELECT count(*)", {}, Exception("database is locked")
            )
            yield mock_session

        app.dependency_overrides[get_session] = override_get_session_broken

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/ready")

        app.dependency_overrides.clear()

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "not ready"
        assert data["database"] == "disconnected"
        assert data["card_count"] is None


def test_app_metadata() -> None:
    assert app.title == "DeckLimit"
    assert set(app.openapi()["paths"]) >= {
        "/health",
        "/ready",
        "/prices/status",
        "/prices/{card_name}",
    }
