from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI

from decklimit.api import health_router, prices_router
from decklimit.config import settings
from decklimit.db.database import init_db
from decklimit.jobs.update_prices import PriceScrapeScheduler


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create tables, then own the price scheduler for the app's lifetime."""
    await init_db()

    scheduler = PriceScrapeScheduler()
    app.state.price_scheduler = scheduler
    if settings.run_scheduler:
        scheduler.start()
    try:
        yield
    finally:
        await scheduler.stop()


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("decklimit"),
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(prices_router)
