"""Version 1 dialect: flat, numerically keyed property objects.

Every top-level key other than ``version`` and ``styleProperty`` holds one
property object.  Each object becomes one rule whose symbolizers are all the
types (polygon, line, point, text) for which it sets at least one property;
text additionally needs a ``label``.  There are no shared values and no
default inheritance.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from mapstyle.dsl.defaults import LayeredProperties
from mapstyle.dsl.properties import VOCABULARY, CompileContext, build_symbolizer, parse_scale
from mapstyle.ecql.ast import Attribute, Include
from mapstyle.model.document import StyleDocument, is_scalar, raw_string
from mapstyle.model.style import MATCH_ALL, FilterKey, Rule, StyleModel, Symbolizer

logger = logging.getLogger(__name__)

STYLE_PROPERTY_KEY = "styleProperty"
SCALE_KEYS = ("minScale", "maxScale")

# Render order: later symbolizers draw on top.
SYMBOLIZER_ORDER = ("polygon", "line", "point", "text")


def rule_sort_key(key: str) -> tuple[int, float, str]:
    """Ascending numeric keys first, then non-numeric keys lexically."""
    try:
        return (0, float(key), key)
    except ValueError:
        return (1, 0.0, key)


def _property_bag(key: str, body: Mapping[str, Any]) -> dict[str, str]:
    bag: dict[str, str] = {}
    for name, value in body.items():
        if name in SCALE_KEYS:
            continue
        if not is_scalar(value):
            logger.warning("Ignoring non-scalar property %r in style %r", name, key)
            continue
        raw = raw_string(value)
        if raw is not None:
            bag[name] = raw
    return bag


def _filter_for(key: str, style_property: str | None) -> FilterKey:
    if not style_property:
        return MATCH_ALL
    quoted = key.replace("'", "''")
    return FilterKey.of(f"{Attribute(style_property).to_ecql()} = '{quoted}'")


def compile_rule(
    key: str,
    body: Mapping[str, Any],
    style_property: str | None,
    context: CompileContext,
) -> Rule:
    bag = _property_bag(key, body)
    props = LayeredProperties([bag], location=key, interpolate_values=False)

    symbolizers: list[Symbolizer] = []
    for symbolizer_type in SYMBOLIZER_ORDER:
        if not (bag.keys() & VOCABULARY[symbolizer_type]):
            continue
        if symbolizer_type == "text" and "label" not in bag:
            logger.debug("Style %r has text properties but no label; skipping text", key)
            continue
        symbolizers.append(build_symbolizer(symbolizer_type, props, context))

    filter_key = _filter_for(key, style_property)
    predicate = (
        Include()
        if filter_key.is_match_all
        else context.filter_parser.parse_filter(filter_key.expression)
    )
    return Rule(
        filter=filter_key,
        symbolizers=tuple(symbolizers),
        min_scale=parse_scale(raw_string(body.get("minScale")), f"{key}.minScale"),
        max_scale=parse_scale(raw_string(body.get("maxScale")), f"{key}.maxScale"),
        predicate=predicate,
    )


def compile_version1(document: StyleDocument, context: CompileContext) -> StyleModel:
    style_property = raw_string(document.data.get(STYLE_PROPERTY_KEY))
    entries = {k: v for k, v in document.items() if k != STYLE_PROPERTY_KEY}

    rules: list[Rule] = []
    for key in sorted(entries, key=rule_sort_key):
        body = entries[key]
        if not isinstance(body, dict):
            logger.warning("Ignoring top-level key %r: expected an object", key)
            continue
        rules.append(compile_rule(key, body, style_property, context))
    logger.debug("Compiled version 1 style with %d rule(s)", len(rules))
    return StyleModel(rules=tuple(rules), version="1")
