"""
Deck search.

Filters decks by free-text terms and an exact price limit, then pages the
result. Matching uses search keys, so "Mono-Red $20" finds "mono red" decks
with a $20.00 limit.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from decklimit.models.deck import Deck
from decklimit.models.money import Money
from decklimit.services.normalizer import matches_search

RESULTS_PER_PAGE = 25


@dataclass(frozen=True, slots=True)
class DeckListing:
    """A deck together with the name of the user who owns it."""

    owner: str
    deck: Deck

    def haystack(self) -> str:
        return f"{self.owner}-{self.deck.name}-{self.deck.price_limit}"


@dataclass
class FilterResult:
    all_decks: list[DeckListing] = field(default_factory=list)
    current_decks: list[DeckListing] = field(default_factory=list)
    current_page: int = 0
    num_pages: int = 0


def filter_decks(
    listings: Iterable[DeckListing],
    search: str = "",
    price_limit: Money | None = None,
    page: int = 0,
    per_page: int = RESULTS_PER_PAGE,
) -> FilterResult:
    """
    Filter, sort and page deck listings.

    Args:
        listings: Candidate decks
        search: Space-separated terms; a deck matches if any term matches.
            An empty search matches everything.
        price_limit: When set, only decks with exactly this limit are kept
        page: Zero-based page number
        per_page: Page size

    Returns:
        FilterResult sorted by deck name. Out-of-range pages have no
        current decks.
    """
    terms = search.split(" ")

    matched = [
        listing
        for listing in listings
        if (price_limit is None or listing.deck.price_limit == price_limit)
        and matches_search(listing.haystack(), terms)
    ]
    matched.sort(key=lambda listing: listing.deck.name)

    num_pages = (len(matched) + per_page - 1) // per_page

    start = page * per_page
    if start < 0 or start >= len(matched):
        current: list[DeckListing] = []
    else:
        current = matched[start : start + per_page]

    return FilterResult(
        all_decks=matched,
        current_decks=current,
        current_page=page,
        num_pages=num_pages,
    )
