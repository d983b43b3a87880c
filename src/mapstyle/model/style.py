"""Compiled style model: filter keys, typed symbolizers, rules and the style."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping, Union

from mapstyle.ecql.ast import Expression, Filter, Include


# ---------------------------------------------------------------------------
# Filter keys
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FilterKey:
    """The key of a rule: ``*`` (match all) or ``[<ecql>]``.

    kind is ``"all"`` or ``"expression"``; expression holds the text between
    the brackets, verbatim, and is empty for match-all keys.
    """

    kind: str
    expression: str = ""

    @classmethod
    def match_all(cls) -> FilterKey:
        return cls(kind="all")

    @classmethod
    def of(cls, expression: str) -> FilterKey:
        return cls(kind="expression", expression=expression)

    @property
    def is_match_all(self) -> bool:
        return self.kind == "all"

    def __str__(self) -> str:
        if self.is_match_all:
            return "*"
        return f"[{self.expression}]"


MATCH_ALL = FilterKey.match_all()


# ---------------------------------------------------------------------------
# Symbolizer parts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Fill:
    color: str
    opacity: float = 1.0


@dataclass(frozen=True)
class Stroke:
    color: str
    opacity: float = 1.0
    width: float = 1.0
    linecap: str = "butt"
    linejoin: str = "miter"
    dash_array: tuple[float, ...] | None = None


@dataclass(frozen=True)
class Graphic:
    """Point graphic: a well-known mark or an external image."""

    mark: str | None
    external: str | None
    format: str | None
    opacity: float
    size: float
    rotation: float
    fill: Fill
    stroke: Stroke


@dataclass(frozen=True)
class Font:
    family: str = "sans-serif"
    size: float = 10.0
    style: str = "normal"
    weight: str = "normal"


@dataclass(frozen=True)
class Halo:
    color: str
    opacity: float = 1.0
    radius: float = 1.0


@dataclass(frozen=True)
class LiteralLabel:
    text: str

    def render(self, feature: Mapping[str, Any]) -> str:
        return self.text


@dataclass(frozen=True)
class ExpressionLabel:
    """A label computed per feature from an ECQL expression."""

    source: str
    expression: Expression = field(compare=False)

    def render(self, feature: Mapping[str, Any]) -> str:
        value = self.expression.evaluate(feature)
        return "" if value is None else str(value)


Label = Union[LiteralLabel, ExpressionLabel]


# ---------------------------------------------------------------------------
# Symbolizers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PointSymbolizer:
    type: ClassVar[str] = "point"

    graphic: Graphic
    properties: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LineSymbolizer:
    type: ClassVar[str] = "line"

    stroke: Stroke
    properties: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PolygonSymbolizer:
    type: ClassVar[str] = "polygon"

    fill: Fill
    stroke: Stroke
    properties: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TextSymbolizer:
    type: ClassVar[str] = "text"

    label: Label
    font: Font
    fill: Fill
    halo: Halo | None = None
    anchor: tuple[float, float] = (0.5, 0.5)
    displacement: tuple[float, float] = (0.0, 0.0)
    rotation: float = 0.0
    properties: dict[str, str] = field(default_factory=dict)


Symbolizer = Union[PointSymbolizer, LineSymbolizer, PolygonSymbolizer, TextSymbolizer]


# ---------------------------------------------------------------------------
# Rules and style
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rule:
    """A filter bound to an ordered list of symbolizers (later ones draw on top)."""

    filter: FilterKey
    symbolizers: tuple[Symbolizer, ...]
    min_scale: float | None = None
    max_scale: float | None = None
    predicate: Filter = field(default_factory=Include, compare=False)

    def applies_at(self, scale_denominator: float) -> bool:
        """Return True if the scale is in [min_scale, max_scale)."""
        if self.min_scale is not None and scale_denominator < self.min_scale:
            return False
        if self.max_scale is not None and scale_denominator >= self.max_scale:
            return False
        return True

    def applies(self, feature: Mapping[str, Any], scale_denominator: float | None = None) -> bool:
        if scale_denominator is not None and not self.applies_at(scale_denominator):
            return False
        return self.predicate.evaluate(feature)


@dataclass(frozen=True)
class StyleModel:
    """The compiled style: rules in document order."""

    rules: tuple[Rule, ...]
    version: str

    def rules_for(
        self, feature: Mapping[str, Any], scale_denominator: float | None = None
    ) -> list[Rule]:
        """Return the rules that draw *feature*, in rendering order."""
        return [r for r in self.rules if r.applies(feature, scale_denominator)]
