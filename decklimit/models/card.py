from dataclasses import dataclass

from decklimit.models.failure import InvalidInputError
from decklimit.models.money import FREE, Money


@dataclass(frozen=True, slots=True)
class CardEntry:
    """
    One line of a decklist.

    Attributes:
        name: Card name (canonical once priced, as typed before)
        count: Number of copies, always >= 1
        price_per: Price of a single copy
        not_found: True when the name could not be resolved in the price catalog
    """

    name: str
    count: int = 1
    price_per: Money = FREE
    not_found: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count < 1:
            raise InvalidInputError("Card count must be a positive integer", detail=repr(self.count))

    def total_price(self) -> Money:
        return self.price_per * self.count


@dataclass(frozen=True, slots=True)
class CommanderEntry:
    """Optional single card counted outside the main list."""

    name: str = ""
    price: Money = FREE
    is_present: bool = False
    not_found: bool = False

    @classmethod
    def absent(cls) -> "CommanderEntry":
        return cls()
