"""
Parser for freeform decklist text.

Format, one card per line:
    [<count>[x]<whitespace>]<card name>

Example:
    4 Lightning Bolt
    4x Monastery Swiftspear
    Sol Ring

There are no headers, comments or escapes. Lines that do not name a card are
skipped silently.
"""

import re

from decklimit.models.card import CardEntry

# Pattern: "4 Lightning Bolt", "4x Lightning Bolt" or "Lightning Bolt"
# Groups: (count or None, card_name)
DECKLIST_LINE_PATTERN = re.compile(r"^(?:(\d+)[xX]?\s+)?(.*\S)$")


def parse_line(line: str) -> CardEntry | None:
    """
    Parse one decklist line.

    Args:
        line: Raw line of user text

    Returns:
        CardEntry with the count (default 1) and trimmed name, or None for a
        blank line, a bare number, or a zero count.
    """
    line = line.strip()
    if not line:
        return None

    match = DECKLIST_LINE_PATTERN.match(line)
    if not match:
        return None

    count_text, name = match.groups()
    name = name.strip()

    if count_text is None:
        # "4" on its own is a count with no card
        if name.isdigit():
            return None
        return CardEntry(name=name)

    count = int(count_text)
    if count < 1:
        return None

    return CardEntry(name=name, count=count)


def parse_lines(text: str) -> list[CardEntry]:
    """
    Parse a multi-line decklist.

    Args:
        text: Decklist text with any line ending style

    Returns:
        Entries in input order; non-matching lines are dropped.
    """
    entries: list[CardEntry] = []

    for line in text.splitlines():
        entry = parse_line(line)
        if entry is not None:
            entries.append(entry)

    return entries
