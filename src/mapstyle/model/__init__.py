"""mapstyle model layer -- public type re-exports."""

from mapstyle.model.diagnostic import Diagnostic, Severity
from mapstyle.model.document import PropertyBag, StyleDocument
from mapstyle.model.style import (
    MATCH_ALL,
    ExpressionLabel,
    Fill,
    FilterKey,
    Font,
    Graphic,
    Halo,
    Label,
    LineSymbolizer,
    LiteralLabel,
    PointSymbolizer,
    PolygonSymbolizer,
    Rule,
    Stroke,
    StyleModel,
    Symbolizer,
    TextSymbolizer,
)

__all__ = [
    # document
    "StyleDocument",
    "PropertyBag",
    # style
    "FilterKey",
    "MATCH_ALL",
    "Fill",
    "Stroke",
    "Graphic",
    "Font",
    "Halo",
    "Label",
    "LiteralLabel",
    "ExpressionLabel",
    "PointSymbolizer",
    "LineSymbolizer",
    "PolygonSymbolizer",
    "TextSymbolizer",
    "Symbolizer",
    "Rule",
    "StyleModel",
    # diagnostic
    "Severity",
    "Diagnostic",
]
