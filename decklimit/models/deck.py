from dataclasses import dataclass, field
from datetime import datetime

from decklimit.models.failure import InvalidInputError
from decklimit.models.money import Money
from decklimit.models.snapshot import Snapshot
from decklimit.services.normalizer import search_key


@dataclass
class Deck:
    """
    A price-limited deck and its saved history.

    Attributes:
        name: Deck name (unique per owner under search-key comparison)
        creation_date: When the deck was created
        price_limit: Maximum total price for the deck to be legal
        staging_area: Working copy edited before being saved
        snapshots: Saved snapshots, oldest first. Append-only except for
            clear_history().

    Callers must serialize edits to a single deck; nothing here locks.
    """

    name: str
    creation_date: datetime
    price_limit: Money
    staging_area: Snapshot = field(default_factory=Snapshot)
    snapshots: list[Snapshot] = field(default_factory=list)

    def normalized_name(self) -> str:
        return search_key(self.name)

    def pretty_creation_date(self) -> str:
        d = self.creation_date
        return f"{d.year}/{d.month}/{d.day}"

    # --- History ---

    def latest_snapshot(self) -> Snapshot | None:
        if not self.snapshots:
            return None
        return self.snapshots[-1]

    def snapshots_reversed(self) -> list[Snapshot]:
        """Snapshots newest first."""
        return list(reversed(self.snapshots))

    def save_snapshot(self, now: datetime) -> Snapshot:
        """Append a copy of the staging area to the history."""
        snapshot = self.staging_area.clone(date=now)
        self.snapshots.append(snapshot)
        return snapshot

    def revert_changes(self) -> None:
        """
        Replace the staging area with the latest snapshot.

        Raises:
            InvalidInputError: If the deck has no snapshots
        """
        latest = self.latest_snapshot()
        if latest is None:
            raise InvalidInputError("Deck has no snapshots", detail=self.name)
        self.staging_area = latest.clone()

    def clear_history(self) -> None:
        """Delete every snapshot. Destructive and intentional."""
        self.snapshots = []

    def is_saved(self) -> bool:
        """True when the staging area matches the latest snapshot exactly."""
        latest = self.latest_snapshot()
        if latest is None:
            return False
        return (
            self.staging_area.has_identical_cards(latest)
            and self.staging_area.total_price() == latest.total_price()
        )

    # --- Pricing and legality ---

    def current_price_snapshot(self) -> Snapshot | None:
        """
        Snapshot holding the best-case current price.

        Starts at the latest snapshot and walks back through older snapshots
        while they list identical cards, keeping the one with the lowest
        total. Only a strictly lower total replaces the current best. Stops
        at the first snapshot whose cards differ.
        """
        latest = self.latest_snapshot()
        if latest is None:
            return None

        best = latest
        for snapshot in reversed(self.snapshots[:-1]):
            if not snapshot.has_identical_cards(latest):
                break
            if snapshot.total_price() < best.total_price():
                best = snapshot

        return best

    def is_grandfather_legal(self) -> bool:
        snapshot = self.current_price_snapshot()
        return snapshot is not None and snapshot.is_grandfather_legal

    def is_snapshot_legal(self, snapshot: Snapshot | None) -> bool:
        """
        Legality of a snapshot against this deck's price limit.

        Any unresolved card fails legality regardless of price. Otherwise a
        grandfathered snapshot is legal, and an ordinary one is legal when its
        total does not exceed the limit.
        """
        if snapshot is None:
            return False
        if snapshot.commander.is_present and snapshot.commander.not_found:
            return False
        if any(entry.not_found for entry in snapshot.decklist):
            return False
        if any(entry.not_found for entry in snapshot.sideboard):
            return False

        return snapshot.is_grandfather_legal or snapshot.total_price() <= self.price_limit

    def is_legal(self) -> bool:
        return self.is_snapshot_legal(self.current_price_snapshot())

    def is_staging_area_legal(self) -> bool:
        return self.is_snapshot_legal(self.staging_area)
