"""
Card name normalization.

Two distinct flavors, both case-insensitive and idempotent:

    card_id("Lightning Bolt")     -> "lightningbolt"
    search_key("Lightning Bolt")  -> "lightning-bolt"

card_id keys the price catalog; punctuation and spacing differences between a
scraped listing and a typed decklist disappear. search_key keeps word
boundaries as "-" so substring search over a haystack built the same way is
robust to formatting noise.
"""

from collections.abc import Iterable

PLACEHOLDER = "-"


def card_id(text: str) -> str:
    """Lowercase letters and digits only; everything else is dropped."""
    return "".join(ch for ch in text.lower() if ch.isalnum())


def search_key(text: str) -> str:
    """
    Fold text into a search key.

    "$" is dropped, uppercase letters are lowercased, lowercase letters and
    digits are kept, and every other character (whitespace included) becomes
    a single "-". Runs of placeholders are not collapsed.
    """
    chars: list[str] = []
    for ch in text:
        if ch == "$":
            continue
        folded = ch.lower() if ch.isupper() else ch
        for c in folded:
            chars.append(c if c.islower() or c.isnumeric() else PLACEHOLDER)
    return "".join(chars)


def matches_search(haystack: str, terms: Iterable[str]) -> bool:
    """True if any term's search key occurs in the haystack's search key."""
    key = search_key(haystack)
    return any(search_key(term) in key for term in terms)
