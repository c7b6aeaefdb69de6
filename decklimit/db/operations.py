"""
Database operations for the price catalog and scraper stats.

The catalog is only ever replaced wholesale; there is no per-card update.
Callers own the transaction (see ``decklimit.db.database.transaction``).
"""

from collections.abc import Iterable
from datetime import UTC, datetime

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from decklimit.models.catalog import InMemoryPriceCatalog, PriceCatalogEntry, ScraperStats
from decklimit.models.db import PriceEntryDB, ScraperStatsDB
from decklimit.models.money import Money
from decklimit.models.snapshot import Snapshot
from decklimit.services.normalizer import card_id
from decklimit.services.pricing import calculate_prices, card_names

# --- Price Catalog Operations ---


def price_entry_to_model(db_entry: PriceEntryDB) -> PriceCatalogEntry:
    """Convert a database price entry to a domain model."""
    return PriceCatalogEntry(id=db_entry.id, name=db_entry.name, price=Money(db_entry.price))


async def replace_all_prices(session: AsyncSession, entries: Iterable[PriceCatalogEntry]) -> int:
    """
    Replace the entire price catalog.

    Deletes every existing row and inserts ``entries``. Run inside a single
    transaction so readers see either the old or the new catalog.

    Returns:
        Number of entries written.

    Raises:
        ValueError: If two entries share an id
    """
    rows: dict[str, PriceEntryDB] = {}
    for entry in entries:
        if entry.id in rows:
            msg = f"Duplicate price catalog id '{entry.id}'"
            raise ValueError(msg)
        rows[entry.id] = PriceEntryDB(id=entry.id, name=entry.name, price=entry.price.amount)

    await session.execute(delete(PriceEntryDB))
    session.add_all(rows.values())
    await session.flush()
    return len(rows)


async def get_price_entry(session: AsyncSession, entry_id: str) -> PriceCatalogEntry | None:
    """Point lookup by normalized card id."""
    result = await session.execute(select(PriceEntryDB).where(PriceEntryDB.id == entry_id))
    db_entry = result.scalar_one_or_none()
    if db_entry is None:
        return None
    return price_entry_to_model(db_entry)


async def count_prices(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(PriceEntryDB))
    return int(result.scalar_one())


async def load_price_catalog(session: AsyncSession, names: Iterable[str]) -> InMemoryPriceCatalog:
    """
    Load the catalog entries needed to price ``names``.

    Returns:
        InMemoryPriceCatalog holding only the matching entries
    """
    ids = {card_id(name) for name in names}
    ids.discard("")
    if not ids:
        return InMemoryPriceCatalog()

    result = await session.execute(select(PriceEntryDB).where(PriceEntryDB.id.in_(ids)))
    return InMemoryPriceCatalog(price_entry_to_model(row) for row in result.scalars().all())


async def price_snapshot(session: AsyncSession, snapshot: Snapshot) -> Snapshot:
    """Resolve every card in ``snapshot`` against the stored catalog."""
    catalog = await load_price_catalog(session, card_names(snapshot))
    return calculate_prices(snapshot, catalog)


# --- Scraper Stats Operations ---


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


async def get_scraper_stats(session: AsyncSession) -> ScraperStats | None:
    """
    Get the last scrape outcome.

    Returns None if no scrape has ever been recorded.
    """
    result = await session.execute(
        select(ScraperStatsDB).order_by(ScraperStatsDB.id.desc()).limit(1)
    )
    row = result.scalar_one_or_none()
    if row is None:
        return None
    return ScraperStats(last_update=_as_utc(row.last_update), last_error=row.last_error)


async def set_scraper_stats(session: AsyncSession, stats: ScraperStats) -> None:
    """Replace the scraper stats record."""
    await session.execute(delete(ScraperStatsDB))
    session.add(ScraperStatsDB(last_update=stats.last_update, last_error=stats.last_error))
    await session.flush()
