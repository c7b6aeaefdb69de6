"""Tests for price catalog and scraper stats persistence."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from decklimit.db.database import transaction
from decklimit.db.operations import (
    count_prices,
    get_price_entry,
    get_scraper_stats,
    load_price_catalog,
    price_snapshot,
    replace_all_prices,
    set_scraper_stats,
)
from decklimit.models.card import CardEntry
from decklimit.models.catalog import PriceCatalogEntry, ScraperStats
from decklimit.models.money import Money
from decklimit.models.snapshot import Snapshot


def entry(entry_id: str, name: str, price: str) -> PriceCatalogEntry:
    return PriceCatalogEntry(id=entry_id, name=name, price=Money(price))


OLD_CATALOG = [
    entry("lightningbolt", "Lightning Bolt", "1.50"),
    entry("counterspell", "Counterspell", "0.25"),
]


class TestPriceCatalogOperations:
    async def test_replace_all_prices(self, session: AsyncSession) -> None:
        """Entries are stored and readable by id."""
        written = await replace_all_prices(session, OLD_CATALOG)
        await session.commit()

        assert written == 2
        assert await count_prices(session) == 2
        stored = await get_price_entry(session, "lightningbolt")
        assert stored == entry("lightningbolt", "Lightning Bolt", "1.50")

    async def test_get_missing_entry(self, session: AsyncSession) -> None:
        assert await get_price_entry(session, "blacklotus") is None

    async def test_replace_discards_old_entries(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        """Cards missing from the new scrape disappear from the catalog."""
        async with transaction(session_factory) as session:
            await replace_all_prices(session, OLD_CATALOG)
        async with transaction(session_factory) as session:
            await replace_all_prices(session, [entry("counterspell", "Counterspell", "0.20")])

        async with session_factory() as session:
            assert await count_prices(session) == 1
            assert await get_price_entry(session, "lightningbolt") is None
            stored = await get_price_entry(session, "counterspell")
            assert stored.price == Money("0.20")

    async def test_failed_replace_keeps_old_catalog(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        """A replacement that fails partway never becomes visible."""
        async with transaction(session_factory) as session:
            await replace_all_prices(session, OLD_CATALOG)

        with pytest.raises(RuntimeError):
            async with transaction(session_factory) as session:
                await replace_all_prices(session, [entry("opt", "Opt", "0.10")])
                raise RuntimeError("stats write failed")

        async with session_factory() as session:
            assert await count_prices(session) == 2
            assert await get_price_entry(session, "opt") is None

    async def test_duplicate_ids_rejected(self, session: AsyncSession) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            await replace_all_prices(
                session, [entry("opt", "Opt", "0.10"), entry("opt", "Opt", "0.05")]
            )

    async def test_load_price_catalog(self, session: AsyncSession) -> None:
        """Only the requested cards are loaded, matched by normalized id."""
        await replace_all_prices(session, OLD_CATALOG)
        await session.commit()

        catalog = await load_price_catalog(session, ["LIGHTNING BOLT", "Nope"])

        assert len(catalog) == 1
        assert catalog.lookup("lightningbolt").name == "Lightning Bolt"

    async def test_load_price_catalog_no_names(self, session: AsyncSession) -> None:
        catalog = await load_price_catalog(session, ["", "!!!"])
        assert len(catalog) == 0

    async def test_price_snapshot(self, session: AsyncSession) -> None:
        await replace_all_prices(session, OLD_CATALOG)
        await session.commit()

        snapshot = Snapshot(
            decklist=[
                CardEntry(name="lightning bolt", count=4),
                CardEntry(name="Mountain", count=16),
                CardEntry(name="Lightening Bolt", count=1),
            ]
        )
        priced = await price_snapshot(session, snapshot)

        assert priced.decklist[0].name == "Lightning Bolt"
        assert priced.decklist[1].not_found is False
        assert priced.decklist[2].not_found is True
        assert priced.total_price() == Money(6)


class TestScraperStatsOperations:
    async def test_no_stats_recorded(self, session: AsyncSession) -> None:
        assert await get_scraper_stats(session) is None

    async def test_set_and_get(self, session: AsyncSession, fixed_now: datetime) -> None:
        await set_scraper_stats(session, ScraperStats(last_update=fixed_now))
        await session.commit()

        stats = await get_scraper_stats(session)

        assert stats == ScraperStats(last_update=fixed_now)
        assert stats.succeeded is True
        assert stats.last_update.tzinfo is not None

    async def test_set_replaces_previous(self, session: AsyncSession, fixed_now: datetime) -> None:
        """Only the latest outcome is kept."""
        await set_scraper_stats(session, ScraperStats(last_update=fixed_now))
        later = fixed_now + timedelta(hours=1)
        await set_scraper_stats(session, ScraperStats(last_update=later, last_error="HTTP 500"))
        await session.commit()

        stats = await get_scraper_stats(session)

        assert stats.last_update == later
        assert stats.last_error == "HTTP 500"
        assert stats.succeeded is False

    async def test_naive_timestamps_read_as_utc(self, session: AsyncSession) -> None:
        naive = datetime(2024, 3, 9, 12, 0)
        await set_scraper_stats(session, ScraperStats(last_update=naive))
        await session.commit()

        stats = await get_scraper_stats(session)

        assert stats.last_update == naive.replace(tzinfo=UTC)
