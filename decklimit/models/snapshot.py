"""
Deck snapshots.

A Snapshot is an immutable capture of a deck's card lists, commander and
grandfather flag. Edits produce new snapshots via ``clone()``; nothing that
has been appended to a deck's history can change afterwards.
"""

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from decklimit.models.card import CardEntry, CommanderEntry
from decklimit.models.money import FREE, Money


def _dump(entries: Iterable[CardEntry]) -> str:
    return "".join(f"{entry.count} {entry.name}\n" for entry in entries)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """
    Attributes:
        date: When the snapshot was saved (None for an unsaved staging area)
        decklist: Main deck entries, in input order
        sideboard: Sideboard entries, in input order
        commander: Optional commander card
        is_grandfather_legal: Legal regardless of price when set
    """

    date: datetime | None = None
    decklist: tuple[CardEntry, ...] = ()
    sideboard: tuple[CardEntry, ...] = ()
    commander: CommanderEntry = field(default_factory=CommanderEntry.absent)
    is_grandfather_legal: bool = False

    def __post_init__(self) -> None:
        # Callers may hand in lists; never keep a reference to them
        object.__setattr__(self, "decklist", tuple(self.decklist))
        object.__setattr__(self, "sideboard", tuple(self.sideboard))

    def clone(self, **changes: Any) -> "Snapshot":
        """Return a copy with ``changes`` applied. The original is untouched."""
        return dataclasses.replace(self, **changes)

    def total_price(self) -> Money:
        total = sum((entry.total_price() for entry in self.decklist), FREE)
        total += sum((entry.total_price() for entry in self.sideboard), FREE)
        if self.commander.is_present:
            total += self.commander.price
        return total

    def total_decklist_count(self) -> int:
        """Main deck card count; a present commander counts as one card."""
        count = sum(entry.count for entry in self.decklist)
        if self.commander.is_present:
            count += 1
        return count

    def total_sideboard_count(self) -> int:
        return sum(entry.count for entry in self.sideboard)

    def decklist_dump(self) -> str:
        return _dump(self.decklist)

    def sideboard_dump(self) -> str:
        return _dump(self.sideboard)

    def has_identical_cards(self, other: "Snapshot") -> bool:
        """
        True when both snapshots list the same cards.

        Prices are ignored: two snapshots with identical cards may still have
        different totals if the catalog changed between them.
        """
        return (
            self.decklist_dump() == other.decklist_dump()
            and self.sideboard_dump() == other.sideboard_dump()
            and self.commander.is_present == other.commander.is_present
            and self.commander.name == other.commander.name
        )

    def pretty_date(self) -> str:
        if self.date is None:
            return ""
        return f"{self.date.year}/{self.date.month}/{self.date.day}"
