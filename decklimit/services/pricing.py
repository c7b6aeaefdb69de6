"""
Card pricing and deck legality.

Resolves typed card names to canonical names and prices through an injected
PriceCatalog. Everything here is synchronous and works on values owned by the
caller, so it is safe to call from any number of concurrent requests.

A card that is missing from the catalog is not an error: it is priced at
zero, flagged ``not_found``, and makes its snapshot illegal.
"""

from datetime import datetime

from decklimit.models.card import CardEntry, CommanderEntry
from decklimit.models.catalog import PriceCatalog
from decklimit.models.deck import Deck
from decklimit.models.money import FREE, Money
from decklimit.models.snapshot import Snapshot
from decklimit.parsers.decklist import parse_lines
from decklimit.services.normalizer import card_id

# Basic lands cost nothing and are never looked up
FREE_CARDS = ("Plains", "Island", "Swamp", "Mountain", "Forest")

_FREE_CARDS_BY_ID = {card_id(name): name for name in FREE_CARDS}


def resolve_card_price(name: str, catalog: PriceCatalog) -> tuple[str, Money, bool]:
    """
    Resolve a typed card name.

    Args:
        name: Card name as supplied by the user
        catalog: Price catalog to look the card up in

    Returns:
        Tuple of (canonical_name, price, found). On a catalog miss the
        original name is returned with a zero price and found=False.
    """
    key = card_id(name)

    free_name = _FREE_CARDS_BY_ID.get(key)
    if free_name is not None:
        return free_name, FREE, True

    entry = catalog.lookup(key)
    if entry is None:
        return name, FREE, False
    return entry.name, entry.price, True


def price_card_entry(entry: CardEntry, catalog: PriceCatalog) -> CardEntry:
    name, price, found = resolve_card_price(entry.name, catalog)
    return CardEntry(name=name, count=entry.count, price_per=price, not_found=not found)


def price_commander(commander: CommanderEntry, catalog: PriceCatalog) -> CommanderEntry:
    if not commander.is_present:
        return commander
    name, price, found = resolve_card_price(commander.name, catalog)
    return CommanderEntry(name=name, price=price, is_present=True, not_found=not found)


def calculate_prices(snapshot: Snapshot, catalog: PriceCatalog) -> Snapshot:
    """Return a copy of ``snapshot`` with every card resolved against the catalog."""
    return snapshot.clone(
        decklist=[price_card_entry(entry, catalog) for entry in snapshot.decklist],
        sideboard=[price_card_entry(entry, catalog) for entry in snapshot.sideboard],
        commander=price_commander(snapshot.commander, catalog),
    )


def parse_snapshot(
    decklist: str = "",
    sideboard: str = "",
    commander: str = "",
    grandfather: bool = False,
    date: datetime | None = None,
) -> Snapshot:
    """
    Parse decklist text into an unpriced Snapshot.

    Args:
        decklist: Main deck text, one card per line
        sideboard: Sideboard text, one card per line
        commander: Commander name; blank means no commander
        grandfather: Whether the snapshot is grandfathered
        date: Snapshot date (None for a staging area)
    """
    commander = commander.strip()
    if commander:
        commander_entry = CommanderEntry(name=commander, is_present=True)
    else:
        commander_entry = CommanderEntry.absent()

    return Snapshot(
        date=date,
        decklist=parse_lines(decklist),
        sideboard=parse_lines(sideboard),
        commander=commander_entry,
        is_grandfather_legal=grandfather,
    )


def build_snapshot(
    catalog: PriceCatalog,
    decklist: str = "",
    sideboard: str = "",
    commander: str = "",
    grandfather: bool = False,
    date: datetime | None = None,
) -> Snapshot:
    """Parse decklist text and price it against ``catalog``."""
    snapshot = parse_snapshot(decklist, sideboard, commander, grandfather, date)
    return calculate_prices(snapshot, catalog)


def update_staging_area(
    deck: Deck,
    catalog: PriceCatalog,
    decklist: str = "",
    sideboard: str = "",
    commander: str = "",
    grandfather: bool = False,
) -> Snapshot:
    """Replace the deck's staging area with freshly parsed and priced text."""
    deck.staging_area = build_snapshot(
        catalog,
        decklist=decklist,
        sideboard=sideboard,
        commander=commander,
        grandfather=grandfather,
    )
    return deck.staging_area


def is_snapshot_legal(deck: Deck, snapshot: Snapshot | None) -> bool:
    """Legality of ``snapshot`` against ``deck``'s price limit."""
    return deck.is_snapshot_legal(snapshot)


def card_names(snapshot: Snapshot) -> set[str]:
    """Every card name a snapshot needs priced, commander included."""
    names = {entry.name for entry in snapshot.decklist}
    names.update(entry.name for entry in snapshot.sideboard)
    if snapshot.commander.is_present:
        names.add(snapshot.commander.name)
    return names
