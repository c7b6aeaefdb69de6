from decklimit.models.card import CardEntry, CommanderEntry
from decklimit.models.catalog import (
    InMemoryPriceCatalog,
    PriceCatalog,
    PriceCatalogEntry,
    ScraperStats,
)
from decklimit.models.deck import Deck
from decklimit.models.failure import (
    FailureDetail,
    FailureKind,
    FetchFailure,
    InvalidInputError,
    KnownError,
    ParseFailure,
    ScrapeError,
)
from decklimit.models.money import FREE, Money
from decklimit.models.snapshot import Snapshot

__all__ = [
    "CardEntry",
    "CommanderEntry",
    "Deck",
    "FREE",
    "FailureDetail",
    "FailureKind",
    "FetchFailure",
    "InMemoryPriceCatalog",
    "InvalidInputError",
    "KnownError",
    "Money",
    "ParseFailure",
    "PriceCatalog",
    "PriceCatalogEntry",
    "ScrapeError",
    "ScraperStats",
    "Snapshot",
]
