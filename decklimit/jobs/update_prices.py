"""
Scheduled job to refresh the card price catalog.

Scrapes TCGplayer and replaces the stored catalog in one transaction.
Can be run once as a standalone script, kept running with ``--forever``,
or owned by the API process through PriceScrapeScheduler.
"""

import argparse
import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from decklimit.config import (
    CHECK_INTERVAL_SECONDS,
    REFRESH_WINDOW_HOURS,
    SCRAPE_DELAY_SECONDS,
    settings,
)
from decklimit.db.database import async_session_factory, init_db, transaction
from decklimit.db.operations import get_scraper_stats, replace_all_prices, set_scraper_stats
from decklimit.models.catalog import ScraperStats
from decklimit.models.failure import ScrapeError
from decklimit.scrapers.tcgplayer import scrape_prices

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
ClientFactory = Callable[[], httpx.AsyncClient]


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_http_client() -> httpx.AsyncClient:
    """HTTP client used for scraping."""
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
        timeout=settings.http_timeout_seconds,
    )


async def record_stats(
    session_factory: async_sessionmaker[AsyncSession], stats: ScraperStats
) -> bool:
    """Write ``stats``. Returns False, after logging, if the database refuses."""
    try:
        async with transaction(session_factory) as session:
            await set_scraper_stats(session, stats)
    except SQLAlchemyError as e:
        logger.error("Price scraper: could not record stats: %s", e)
        return False
    return True


async def run_price_update(
    client: httpx.AsyncClient,
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
    now: Clock = utcnow,
    delay: float = SCRAPE_DELAY_SECONDS,
) -> ScraperStats:
    """
    Run one full scrape and publish the result.

    On success the catalog is replaced and the stats record has no error.
    On failure the catalog is left untouched and the error is recorded.
    Scrape and database failures are never raised; the returned stats
    describe them even when they could not be stored.

    Args:
        client: HTTP client for requests
        session_factory: Where the catalog and stats are stored
        now: Clock for the stats timestamp
        delay: Pause before each listing page fetch

    Returns:
        The ScraperStats that were recorded
    """
    logger.info("Price scraper: starting")

    try:
        entries = await scrape_prices(client, delay=delay)
        async with transaction(session_factory) as session:
            count = await replace_all_prices(session, entries)
            stats = ScraperStats(last_update=now())
            await set_scraper_stats(session, stats)
    except (ScrapeError, SQLAlchemyError) as e:
        logger.error("Price scraper: failed! %s", e)
        stats = ScraperStats(last_update=now(), last_error=str(e))
        await record_stats(session_factory, stats)
        return stats

    logger.info("Price scraper: complete! %d cards priced", count)
    return stats


class PriceScrapeScheduler:
    """
    Background task that keeps the price catalog fresh.

    Every ``check_interval`` seconds it checks the last scrape time. When the
    stats are missing, unreadable, or older than ``refresh_window``, one scrape
    runs and must finish before the next check. At most one scrape is ever in
    flight; ``trigger()`` declines while one is running.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
        refresh_window: timedelta = timedelta(hours=REFRESH_WINDOW_HOURS),
        check_interval: float = CHECK_INTERVAL_SECONDS,
        client_factory: ClientFactory = new_http_client,
        now: Clock = utcnow,
        delay: float = SCRAPE_DELAY_SECONDS,
    ) -> None:
        self.session_factory = session_factory
        self.refresh_window = refresh_window
        self.check_interval = check_interval
        self.client_factory = client_factory
        self.now = now
        self.delay = delay
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        """True while the background task is alive."""
        return self._task is not None and not self._task.done()

    @property
    def scrape_in_flight(self) -> bool:
        return self._lock.locked()

    def start(self) -> None:
        """Start the background task. Does nothing if already started."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run_forever(), name="price-scrape-scheduler")
        logger.info(
            "Price scheduler started (check every %ss, refresh after %s)",
            self.check_interval,
            self.refresh_window,
        )

    async def stop(self) -> None:
        """Cancel the background task and wait for it to end."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Price scheduler stopped")

    async def is_stale(self) -> bool:
        """True when the catalog is due for a refresh."""
        try:
            async with self.session_factory() as session:
                stats = await get_scraper_stats(session)
        except SQLAlchemyError as e:
            logger.warning("Could not read scraper stats, treating as stale: %s", e)
            return True

        if stats is None:
            return True
        return stats.last_update + self.refresh_window < self.now()

    async def run_once(self) -> ScraperStats:
        """Run one scrape, waiting for any scrape already in flight."""
        async with self._lock, self.client_factory() as client:
            return await run_price_update(
                client,
                session_factory=self.session_factory,
                now=self.now,
                delay=self.delay,
            )

    async def trigger(self) -> bool:
        """
        Run a scrape unless one is already in flight.

        Returns:
            True if a scrape ran, False if it was skipped
        """
        if self._lock.locked():
            logger.debug("Price scrape already in flight; skipping trigger")
            return False
        await self.run_once()
        return True

    async def check_once(self) -> bool:
        """Scrape if stale. Returns True if a scrape ran."""
        if not await self.is_stale():
            return False
        return await self.trigger()

    async def _run_forever(self) -> None:
        while True:
            await asyncio.sleep(self.check_interval)
            try:
                await self.check_once()
            except Exception:
                # Keep the schedule alive; the next tick retries
                logger.exception("Price scheduler check failed")


async def run_scheduler_forever(scheduler: PriceScrapeScheduler | None = None) -> None:
    """Run the scheduler in the foreground until cancelled."""
    scheduler = scheduler or PriceScrapeScheduler()
    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        await scheduler.stop()


async def _run(forever: bool) -> ScraperStats | None:
    await init_db()
    if forever:
        await run_scheduler_forever()
        return None
    async with new_http_client() as client:
        return await run_price_update(client)


def main() -> None:
    """CLI entry point for refreshing the price catalog."""
    parser = argparse.ArgumentParser(description="Refresh the card price catalog")
    parser.add_argument(
        "--forever",
        action="store_true",
        help="Keep running and refresh whenever prices go stale",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    stats = asyncio.run(_run(args.forever))

    if stats is not None and not stats.succeeded:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
