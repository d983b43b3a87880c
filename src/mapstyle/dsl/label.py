"""Label classification: literal text or a bracketed ECQL expression."""

from __future__ import annotations

from mapstyle.dsl.protocols import FilterParser
from mapstyle.model.style import ExpressionLabel, Label, LiteralLabel


def label_expression(value: str) -> str | None:
    """Return the expression text of a ``[expr]`` label, or None for a literal."""
    trimmed = value.strip()
    if len(trimmed) >= 2 and trimmed.startswith("[") and trimmed.endswith("]"):
        return trimmed[1:-1]
    return None


def classify_label(value: str, filter_parser: FilterParser) -> Label:
    expression = label_expression(value)
    if expression is None:
        return LiteralLabel(value)
    return ExpressionLabel(source=expression, expression=filter_parser.parse_expression(expression))
