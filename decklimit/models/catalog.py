from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from decklimit.models.money import Money


@dataclass(frozen=True, slots=True)
class PriceCatalogEntry:
    """
    Cheapest known price for one card identity.

    Attributes:
        id: Normalized card id (lowercase alphanumerics)
        name: Canonical display name
        price: Minimum observed price
    """

    id: str
    name: str
    price: Money


@dataclass(frozen=True, slots=True)
class ScraperStats:
    """Outcome of the most recent scrape attempt."""

    last_update: datetime
    last_error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.last_error is None


class PriceCatalog(Protocol):
    """Point lookup into the price catalog by normalized card id."""

    def lookup(self, card_id: str) -> PriceCatalogEntry | None: ...


class InMemoryPriceCatalog:
    """
    Price catalog held in a dict.

    Holds at most one entry per id; when given duplicates the cheaper entry
    wins and ties keep the first.
    """

    def __init__(self, entries: Iterable[PriceCatalogEntry] = ()) -> None:
        self._entries: dict[str, PriceCatalogEntry] = {}
        for entry in entries:
            current = self._entries.get(entry.id)
            if current is None or entry.price < current.price:
                self._entries[entry.id] = entry

    def lookup(self, card_id: str) -> PriceCatalogEntry | None:
        return self._entries.get(card_id)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._entries
