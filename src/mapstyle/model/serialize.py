"""Plain-dict rendering of a compiled style, for JSON output."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from mapstyle.model.style import (
    ExpressionLabel,
    PointSymbolizer,
    Rule,
    StyleModel,
    Symbolizer,
    TextSymbolizer,
)


def symbolizer_to_dict(symbolizer: Symbolizer) -> dict[str, Any]:
    data: dict[str, Any] = {"type": symbolizer.type}
    if isinstance(symbolizer, TextSymbolizer):
        label = symbolizer.label
        if isinstance(label, ExpressionLabel):
            data["label"] = {"expression": label.expression.to_ecql()}
        else:
            data["label"] = {"literal": label.text}
        data["font"] = asdict(symbolizer.font)
        data["fill"] = asdict(symbolizer.fill)
        data["halo"] = asdict(symbolizer.halo) if symbolizer.halo else None
        data["anchor"] = list(symbolizer.anchor)
        data["displacement"] = list(symbolizer.displacement)
        data["rotation"] = symbolizer.rotation
    elif isinstance(symbolizer, PointSymbolizer):
        data["graphic"] = asdict(symbolizer.graphic)
    else:
        body = asdict(symbolizer)
        body.pop("properties", None)
        data.update(body)
    data["properties"] = dict(symbolizer.properties)
    return data


def rule_to_dict(rule: Rule) -> dict[str, Any]:
    return {
        "filter": str(rule.filter),
        "minScale": rule.min_scale,
        "maxScale": rule.max_scale,
        "symbolizers": [symbolizer_to_dict(s) for s in rule.symbolizers],
    }


def style_to_dict(style: StyleModel) -> dict[str, Any]:
    return {
        "version": style.version,
        "rules": [rule_to_dict(r) for r in style.rules],
    }
