"""Version 2 dialect: shared values, layered defaults and filtered rules.

Top-level scalar keys are both named values (for ``${name}``) and style
level defaults.  Every other top-level key is a rule: ``*`` or ``[ecql]``
mapped to an object holding rule defaults, optional ``minScale`` and
``maxScale`` and an ordered ``symbolizers`` array.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from mapstyle.dsl.defaults import LayeredProperties
from mapstyle.dsl.filter_key import looks_like_filter_key, parse_filter_key
from mapstyle.dsl.properties import BUILDERS, CompileContext, build_symbolizer, parse_scale
from mapstyle.dsl.values import ValueDictionary, interpolate
from mapstyle.ecql.ast import Include
from mapstyle.errors import MalformedDocument, MissingRequiredProperty, UnknownSymbolizerType
from mapstyle.model.document import PropertyBag, StyleDocument, is_scalar, raw_string
from mapstyle.model.style import Rule, StyleModel, Symbolizer

logger = logging.getLogger(__name__)

SYMBOLIZERS_KEY = "symbolizers"
TYPE_KEY = "type"
RULE_RESERVED_KEYS = frozenset({"minScale", "maxScale", SYMBOLIZERS_KEY})


def partition(document: StyleDocument) -> tuple[dict[str, str], list[tuple[str, Mapping[str, Any]]]]:
    """Split top-level entries into style defaults/values and rule entries."""
    defaults: dict[str, str] = {}
    rules: list[tuple[str, Mapping[str, Any]]] = []
    for key, value in document.items():
        if isinstance(value, dict):
            rules.append((key, value))
        elif is_scalar(value):
            if looks_like_filter_key(key):
                raise MalformedDocument("A rule must map to an object", location=key)
            raw = raw_string(value)
            if raw is not None:
                defaults[key] = raw
        else:
            raise MalformedDocument(
                "Top-level entries must be scalars (values/defaults) or rule objects",
                location=key,
            )
    return defaults, rules


def _rule_defaults(location: str, body: Mapping[str, Any]) -> dict[str, str]:
    defaults: dict[str, str] = {}
    for name, value in body.items():
        if name in RULE_RESERVED_KEYS:
            continue
        if not is_scalar(value):
            raise MalformedDocument("Rule defaults must be scalar values", location=f"{location}.{name}")
        raw = raw_string(value)
        if raw is not None:
            defaults[name] = raw
    return defaults


def _scale(body: Mapping[str, Any], name: str, values: ValueDictionary, location: str) -> float | None:
    raw = raw_string(body.get(name))
    where = f"{location}.{name}"
    if raw is not None:
        raw = interpolate(raw, values, where)
    return parse_scale(raw, where)


def compile_symbolizer(
    index: int,
    body: Any,
    rule_location: str,
    style_defaults: PropertyBag,
    rule_defaults: PropertyBag,
    values: ValueDictionary,
    context: CompileContext,
) -> Symbolizer:
    location = f"{rule_location}.{SYMBOLIZERS_KEY}[{index}]"
    if not isinstance(body, dict):
        raise MalformedDocument("A symbolizer must be an object", location=location)
    raw_type = raw_string(body.get(TYPE_KEY))
    if raw_type is None:
        raise MissingRequiredProperty("A symbolizer requires a 'type' property", location=location)
    symbolizer_type = raw_type.strip().lower()
    if symbolizer_type not in BUILDERS:
        raise UnknownSymbolizerType(
            f"Unknown symbolizer type {raw_type!r}: expected one of {', '.join(BUILDERS)}",
            location=location,
        )

    own: dict[str, str] = {}
    for name, value in body.items():
        if name == TYPE_KEY:
            continue
        if not is_scalar(value):
            raise MalformedDocument("Symbolizer properties must be scalar values", location=f"{location}.{name}")
        raw = raw_string(value)
        if raw is not None:
            own[name] = raw

    props = LayeredProperties([own, rule_defaults, style_defaults], values, location=location)
    return build_symbolizer(symbolizer_type, props, context)


def compile_rule(
    key: str,
    body: Mapping[str, Any],
    style_defaults: PropertyBag,
    values: ValueDictionary,
    context: CompileContext,
) -> Rule:
    filter_key = parse_filter_key(key)
    location = str(filter_key)
    predicate = (
        Include()
        if filter_key.is_match_all
        else context.filter_parser.parse_filter(filter_key.expression)
    )

    symbolizers_json = body.get(SYMBOLIZERS_KEY)
    if symbolizers_json is None:
        raise MissingRequiredProperty("A rule requires a 'symbolizers' array", location=location)
    if not isinstance(symbolizers_json, list):
        raise MalformedDocument("'symbolizers' must be an array", location=location)

    rule_defaults = _rule_defaults(location, body)
    symbolizers = tuple(
        compile_symbolizer(i, sym, location, style_defaults, rule_defaults, values, context)
        for i, sym in enumerate(symbolizers_json)
    )
    logger.debug("Compiled rule %s with %d symbolizer(s)", location, len(symbolizers))
    return Rule(
        filter=filter_key,
        symbolizers=symbolizers,
        min_scale=_scale(body, "minScale", values, location),
        max_scale=_scale(body, "maxScale", values, location),
        predicate=predicate,
    )


def compile_version2(document: StyleDocument, context: CompileContext) -> StyleModel:
    style_defaults, rule_entries = partition(document)
    values = ValueDictionary.from_items(style_defaults.items())
    rules = tuple(
        compile_rule(key, body, style_defaults, values, context) for key, body in rule_entries
    )
    logger.debug(
        "Compiled version 2 style with %d value(s) and %d rule(s)", len(values), len(rules)
    )
    return StyleModel(rules=rules, version="2")
