from decklimit.parsers.decklist import parse_line, parse_lines

__all__ = [
    "parse_line",
    "parse_lines",
]
