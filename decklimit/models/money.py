"""
Exact monetary amounts.

Amounts are held as ``Decimal`` so that summing hundreds of card prices never
drifts. Rounding happens only when rendering.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from decklimit.models.failure import InvalidInputError

_CENTS = Decimal("0.01")

# Width of the sortable rendering: "0012.35" orders correctly up to $9999.99
SORTABLE_WIDTH = 7


def _to_decimal(value: "Money | Decimal | int | float | str") -> Decimal:
    if isinstance(value, Money):
        return value.amount
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise InvalidInputError("Money amount must be numeric", detail=repr(value))
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # str() gives the shortest repr, so Money(12.345) holds exactly 12.345
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise InvalidInputError("Malformed money amount", detail=repr(value)) from None
    else:
        raise InvalidInputError("Money amount must be numeric", detail=repr(value))

    if not result.is_finite():
        raise InvalidInputError("Money amount must be finite", detail=repr(value))
    return result


@dataclass(frozen=True, order=True, slots=True)
class Money:
    """
    A monetary amount in dollars.

    Supports addition, multiplication by a card count, ordering and ``sum()``.

    Renderings:
        str(m) / m.format_currency() -> "$12.35"
        m.sortable()                -> "0012.35"
        m.simple()                  -> "12"
    """

    amount: Decimal = Decimal(0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _to_decimal(self.amount))

    @classmethod
    def parse(cls, text: str) -> "Money":
        """
        Parse displayed price text such as "$1,234.56".

        Raises:
            InvalidInputError: If the text is not a decimal number
        """
        cleaned = text.strip().strip("$").replace(",", "")
        if not cleaned:
            raise InvalidInputError("Malformed money amount", detail=repr(text))
        return cls(cleaned)

    def __add__(self, other: object) -> "Money":
        if isinstance(other, Money):
            return Money(self.amount + other.amount)
        return NotImplemented

    def __radd__(self, other: object) -> "Money":
        # sum() starts from the integer 0
        if isinstance(other, int) and other == 0:
            return self
        return NotImplemented

    def __mul__(self, count: object) -> "Money":
        if isinstance(count, int) and not isinstance(count, bool):
            return Money(self.amount * count)
        return NotImplemented

    __rmul__ = __mul__

    def rounded(self) -> Decimal:
        """Amount rounded half-up to whole cents."""
        return self.amount.quantize(_CENTS, rounding=ROUND_HALF_UP)

    def format_currency(self) -> str:
        return f"${self.rounded():.2f}"

    def sortable(self) -> str:
        """Zero-padded rendering whose lexical order matches numeric order."""
        return f"{self.rounded():0{SORTABLE_WIDTH}.2f}"

    def simple(self) -> str:
        """Whole dollars, truncated."""
        return str(int(self.amount))

    def __str__(self) -> str:
        return self.format_currency()


FREE = Money(0)
