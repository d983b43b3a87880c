"""Rule keys: ``*`` matches everything, ``[<ecql>]`` selects by expression."""

from __future__ import annotations

from mapstyle.errors import InvalidFilterKey
from mapstyle.model.style import MATCH_ALL, FilterKey


def looks_like_filter_key(key: str) -> bool:
    """True if *key* has the shape of a rule key (not necessarily a valid one)."""
    trimmed = key.strip()
    return trimmed == "*" or (trimmed.startswith("[") and trimmed.endswith("]"))


def parse_filter_key(key: str) -> FilterKey:
    """Parse a rule key; the bracketed text is kept verbatim for the filter parser."""
    trimmed = key.strip()
    if trimmed == "*":
        return MATCH_ALL
    if len(trimmed) >= 2 and trimmed.startswith("[") and trimmed.endswith("]"):
        expression = trimmed[1:-1]
        if expression.strip():
            return FilterKey.of(expression)
        raise InvalidFilterKey(f"Empty filter expression in rule key {key!r}")
    raise InvalidFilterKey(
        f"Invalid rule key {key!r}: expected '*' or an ECQL expression in square brackets"
    )


def format_filter_key(filter_key: FilterKey) -> str:
    return str(filter_key)
