from decklimit.db.database import get_session, init_db, transaction
from decklimit.db.operations import (
    count_prices,
    get_price_entry,
    get_scraper_stats,
    load_price_catalog,
    price_entry_to_model,
    price_snapshot,
    replace_all_prices,
    set_scraper_stats,
)

__all__ = [
    "count_prices",
    "get_price_entry",
    "get_scraper_stats",
    "get_session",
    "init_db",
    "load_price_catalog",
    "price_entry_to_model",
    "price_snapshot",
    "replace_all_prices",
    "set_scraper_stats",
    "transaction",
]
