"""Layered default resolution: symbolizer > rule defaults > style defaults."""

from __future__ import annotations

from typing import Sequence

from mapstyle.dsl.values import ValueDictionary, interpolate
from mapstyle.model.document import PropertyBag


def resolve_default(
    name: str,
    style_defaults: PropertyBag,
    rule_defaults: PropertyBag,
    symbolizer_values: PropertyBag,
) -> str | None:
    """Return the raw value of *name* from the most specific layer that sets it."""
    for layer in (symbolizer_values, rule_defaults, style_defaults):
        if name in layer:
            return layer[name]
    return None


class LayeredProperties:
    """Property lookup over an ordered stack of bags, most specific first.

    Every value handed out by :meth:`get` has been interpolated against the
    value dictionary.  Version 1 documents use a single layer and an empty
    dictionary, so their values pass through untouched.
    """

    def __init__(
        self,
        layers: Sequence[PropertyBag],
        values: ValueDictionary | None = None,
        location: str | None = None,
        interpolate_values: bool = True,
    ) -> None:
        self._layers = tuple(layers)
        self._values = values or ValueDictionary.empty()
        self._interpolate = interpolate_values
        self.location = location

    def raw(self, name: str) -> str | None:
        for layer in self._layers:
            if name in layer:
                return layer[name]
        return None

    def get(self, name: str) -> str | None:
        raw = self.raw(name)
        if raw is None or not self._interpolate:
            return raw
        return interpolate(raw, self._values, self._where(name))

    def __contains__(self, name: str) -> bool:
        return any(name in layer for layer in self._layers)

    def names(self) -> set[str]:
        found: set[str] = set()
        for layer in self._layers:
            found.update(layer)
        return found

    def resolved(self, names: Sequence[str] | set[str] | frozenset[str]) -> dict[str, str]:
        """Interpolated values for those of *names* that any layer sets."""
        out: dict[str, str] = {}
        for name in sorted(names):
            value = self.get(name)
            if value is not None:
                out[name] = value
        return out

    def _where(self, name: str) -> str:
        return f"{self.location}.{name}" if self.location else name
