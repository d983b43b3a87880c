"""Shared named values and ``${name}`` interpolation.

Version 2 documents may declare scalar values at the top level and refer to
them from any property with ``${name}``.  Names may only contain letters,
digits, ``_`` and ``-``.  Substitution is a single pass: a referenced value
that itself contains ``${`` is rejected rather than expanded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from mapstyle.errors import (
    MalformedInterpolationToken,
    RecursiveValueReference,
    UnresolvedValueReference,
)

VALUE_NAME_RE = re.compile(r"[A-Za-z0-9_-]+")

# Well-formed tokens only; used to find references without substituting.
TOKEN_RE = re.compile(r"\$\{([A-Za-z0-9_-]+)\}")


@dataclass(frozen=True)
class ValueDictionary:
    """Read-only ``name -> raw string`` mapping built once per document."""

    values: Mapping[str, str]

    @classmethod
    def from_items(cls, items: Iterable[tuple[str, str]]) -> ValueDictionary:
        data = {name: raw for name, raw in items if VALUE_NAME_RE.fullmatch(name)}
        return cls(MappingProxyType(data))

    @classmethod
    def empty(cls) -> ValueDictionary:
        return cls(MappingProxyType({}))

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __len__(self) -> int:
        return len(self.values)

    def lookup(self, name: str, location: str | None = None) -> str:
        try:
            value = self.values[name]
        except KeyError:
            raise UnresolvedValueReference(name, location=location) from None
        if "${" in value:
            raise RecursiveValueReference(name, location=location)
        return value


def references(text: str) -> list[str]:
    """Return the names referenced by well-formed ``${name}`` tokens in *text*."""
    return TOKEN_RE.findall(text)


def interpolate(text: str, values: ValueDictionary, location: str | None = None) -> str:
    """Replace every ``${name}`` token in *text* with its dictionary value.

    Raises UnresolvedValueReference for unknown names and
    MalformedInterpolationToken for an unterminated ``${`` or an illegal name.
    """
    if "${" not in text:
        return text

    parts: list[str] = []
    pos = 0
    while True:
        start = text.find("${", pos)
        if start < 0:
            parts.append(text[pos:])
            break
        end = text.find("}", start + 2)
        if end < 0:
            raise MalformedInterpolationToken(
                f"Unterminated '${{' in {text!r}", location=location
            )
        name = text[start + 2:end]
        if not VALUE_NAME_RE.fullmatch(name):
            raise MalformedInterpolationToken(
                f"Invalid value name {name!r} in {text!r}", location=location
            )
        parts.append(text[pos:start])
        parts.append(values.lookup(name, location))
        pos = end + 1
    return "".join(parts)
