"""Validation rules for style documents.

Each rule is a function taking a StyleDocument and returning a list of
Diagnostic objects describing any issues found.  Rules for one dialect
return nothing for documents of the other.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, Mapping

from mapstyle.dsl.dispatcher import Version, compile_document, select_version
from mapstyle.dsl.filter_key import looks_like_filter_key, parse_filter_key
from mapstyle.dsl.properties import ALL_PROPERTIES, BUILDERS
from mapstyle.dsl.values import VALUE_NAME_RE, references
from mapstyle.dsl.version1 import SCALE_KEYS, STYLE_PROPERTY_KEY
from mapstyle.dsl.version2 import RULE_RESERVED_KEYS, SYMBOLIZERS_KEY, TYPE_KEY
from mapstyle.ecql.parser import parse_filter
from mapstyle.errors import FilterParseError, InvalidFilterKey, StyleError
from mapstyle.model.diagnostic import Diagnostic, Severity
from mapstyle.model.document import StyleDocument, is_scalar, raw_string

# Any "${" that does not start a well-formed token.
_BAD_TOKEN_RE = re.compile(r"\$\{(?![A-Za-z0-9_-]+\})")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_version(document: StyleDocument, version: Version) -> bool:
    return select_version(document) is version


def _object_entries(document: StyleDocument) -> Iterator[tuple[str, Mapping[str, Any]]]:
    for key, value in document.items():
        if isinstance(value, dict):
            yield key.strip(), value


def _v2_symbolizers(
    body: Mapping[str, Any],
) -> Iterator[tuple[int, Mapping[str, Any]]]:
    symbolizers = body.get(SYMBOLIZERS_KEY)
    if isinstance(symbolizers, list):
        for i, sym in enumerate(symbolizers):
            if isinstance(sym, dict):
                yield i, sym


def _v2_strings(document: StyleDocument) -> Iterator[tuple[str, str]]:
    """Every scalar string in a version 2 document with its location."""
    for key, value in document.items():
        if is_scalar(value):
            raw = raw_string(value)
            if raw is not None:
                yield key, raw
    for key, body in _object_entries(document):
        for name, value in body.items():
            if name != SYMBOLIZERS_KEY and is_scalar(value) and value is not None:
                yield f"{key}.{name}", raw_string(value) or ""
        for i, sym in _v2_symbolizers(body):
            for name, value in sym.items():
                if is_scalar(value) and value is not None:
                    yield f"{key}.symbolizers[{i}].{name}", raw_string(value) or ""


# ---------------------------------------------------------------------------
# Structural rules (ERROR severity)
# ---------------------------------------------------------------------------


def check_version(document: StyleDocument) -> list[Diagnostic]:
    """The version must name a supported dialect."""
    if select_version(document) is not None:
        return []
    return [
        Diagnostic(
            rule="version",
            severity=Severity.ERROR,
            message=f"Unsupported style version {document.version!r}",
            location="version",
            fix='Use "1" or "2"',
        )
    ]


def check_has_rules(document: StyleDocument) -> list[Diagnostic]:
    """A style needs at least one rule (version 2) or property object (version 1)."""
    if select_version(document) is None:
        return []
    entries = [
        key
        for key, value in document.items()
        if isinstance(value, dict) and key != STYLE_PROPERTY_KEY
    ]
    if entries:
        return []
    return [
        Diagnostic(
            rule="has_rules",
            severity=Severity.ERROR,
            message="Style defines no rules",
            fix='Add a rule such as "*": {"symbolizers": [...]}',
        )
    ]


def check_rule_keys(document: StyleDocument) -> list[Diagnostic]:
    """Version 2 rule keys must be '*' or a parseable [ECQL] expression."""
    if not _is_version(document, Version.TWO):
        return []
    diagnostics: list[Diagnostic] = []
    for key, value in document.items():
        if is_scalar(value) and looks_like_filter_key(key):
            diagnostics.append(
                Diagnostic(
                    rule="rule_keys",
                    severity=Severity.ERROR,
                    message="A rule must map to an object",
                    location=key,
                )
            )
        if not isinstance(value, dict):
            continue
        try:
            filter_key = parse_filter_key(key)
            if not filter_key.is_match_all:
                parse_filter(filter_key.expression)
        except (InvalidFilterKey, FilterParseError) as e:
            diagnostics.append(
                Diagnostic(
                    rule="rule_keys",
                    severity=Severity.ERROR,
                    message=str(e),
                    location=key,
                )
            )
    return diagnostics


def check_symbolizers(document: StyleDocument) -> list[Diagnostic]:
    """Version 2 rules need a symbolizers array of typed objects; text needs a label."""
    if not _is_version(document, Version.TWO):
        return []
    diagnostics: list[Diagnostic] = []
    style_label = "label" in document.data
    for key, body in _object_entries(document):
        symbolizers = body.get(SYMBOLIZERS_KEY)
        if not isinstance(symbolizers, list) or not symbolizers:
            diagnostics.append(
                Diagnostic(
                    rule="symbolizers",
                    severity=Severity.ERROR,
                    message="Rule has no symbolizers",
                    location=key,
                    fix='Add "symbolizers": [{"type": "polygon"}]',
                )
            )
            continue
        rule_label = "label" in body
        for i, sym in enumerate(symbolizers):
            where = f"{key}.symbolizers[{i}]"
            if not isinstance(sym, dict):
                diagnostics.append(
                    Diagnostic(
                        rule="symbolizers",
                        severity=Severity.ERROR,
                        message="Symbolizer must be an object",
                        location=where,
                    )
                )
                continue
            sym_type = str(sym.get(TYPE_KEY, "")).strip().lower()
            if sym_type not in BUILDERS:
                diagnostics.append(
                    Diagnostic(
                        rule="symbolizers",
                        severity=Severity.ERROR,
                        message=f"Unknown or missing symbolizer type {sym.get(TYPE_KEY)!r}",
                        location=where,
                        fix=f"Use one of {', '.join(BUILDERS)}",
                    )
                )
            elif sym_type == "text" and not ("label" in sym or rule_label or style_label):
                diagnostics.append(
                    Diagnostic(
                        rule="symbolizers",
                        severity=Severity.ERROR,
                        message="Text symbolizer has no label",
                        location=where,
                    )
                )
    return diagnostics


def check_value_references(document: StyleDocument) -> list[Diagnostic]:
    """Every ${name} in a version 2 document must name a declared value."""
    if not _is_version(document, Version.TWO):
        return []
    declared = {
        key
        for key, value in document.items()
        if is_scalar(value) and value is not None and VALUE_NAME_RE.fullmatch(key)
    }
    diagnostics: list[Diagnostic] = []
    for where, text in _v2_strings(document):
        if _BAD_TOKEN_RE.search(text):
            diagnostics.append(
                Diagnostic(
                    rule="value_references",
                    severity=Severity.ERROR,
                    message=f"Malformed ${{...}} token in {text!r}",
                    location=where,
                )
            )
        for name in references(text):
            if name not in declared:
                diagnostics.append(
                    Diagnostic(
                        rule="value_references",
                        severity=Severity.ERROR,
                        message=f"Reference to undeclared value ${{{name}}}",
                        location=where,
                        fix=f'Declare "{name}" at the top level of the style',
                    )
                )
    return diagnostics


# ---------------------------------------------------------------------------
# Advisory rules (WARNING / INFO severity)
# ---------------------------------------------------------------------------


def _scale_pair(body: Mapping[str, Any]) -> tuple[float, float] | None:
    try:
        low = float(raw_string(body.get("minScale")) or "")
        high = float(raw_string(body.get("maxScale")) or "")
    except ValueError:
        return None
    return low, high


def check_scale_bounds(document: StyleDocument) -> list[Diagnostic]:
    """minScale should be below maxScale, or the rule never draws."""
    if select_version(document) is None:
        return []
    diagnostics: list[Diagnostic] = []
    for key, body in _object_entries(document):
        pair = _scale_pair(body)
        if pair is not None and pair[0] >= pair[1]:
            diagnostics.append(
                Diagnostic(
                    rule="scale_bounds",
                    severity=Severity.WARNING,
                    message=f"minScale {pair[0]:g} is not below maxScale {pair[1]:g}; rule never applies",
                    location=key,
                )
            )
    return diagnostics


def check_known_properties(document: StyleDocument) -> list[Diagnostic]:
    """Property names outside the shared vocabulary are ignored by the compiler."""
    version = select_version(document)
    if version is None:
        return []
    diagnostics: list[Diagnostic] = []

    def _check(where: str, names: Any, reserved: frozenset[str]) -> None:
        for name in names:
            if name in ALL_PROPERTIES or name in reserved:
                continue
            diagnostics.append(
                Diagnostic(
                    rule="known_properties",
                    severity=Severity.WARNING,
                    message=f"Unknown property {name!r} is ignored",
                    location=f"{where}.{name}",
                )
            )

    if version is Version.ONE:
        for key, body in _object_entries(document):
            _check(key, body, frozenset(SCALE_KEYS))
        return diagnostics

    for key, body in _object_entries(document):
        _check(key, body, RULE_RESERVED_KEYS)
        for i, sym in _v2_symbolizers(body):
            _check(f"{key}.symbolizers[{i}]", sym, frozenset({TYPE_KEY}))
    return diagnostics


def check_unused_values(document: StyleDocument) -> list[Diagnostic]:
    """Top-level values that are neither referenced nor a property default."""
    if not _is_version(document, Version.TWO):
        return []
    used = {name for _, text in _v2_strings(document) for name in references(text)}
    diagnostics: list[Diagnostic] = []
    for key, value in document.items():
        if not is_scalar(value) or key in ALL_PROPERTIES or key in used:
            continue
        diagnostics.append(
            Diagnostic(
                rule="unused_values",
                severity=Severity.INFO,
                message=f"Value {key!r} is never referenced",
                location=key,
            )
        )
    return diagnostics


# ---------------------------------------------------------------------------
# Compilation check
# ---------------------------------------------------------------------------


def check_compiles(document: StyleDocument) -> list[Diagnostic]:
    """Run the real compiler and report the first error it raises."""
    try:
        compile_document(document)
    except StyleError as e:
        return [
            Diagnostic(
                rule="compiles",
                severity=Severity.ERROR,
                message=str(e),
                location=e.location,
            )
        ]
    return []


STRUCTURAL_RULES = [
    check_version,
    check_has_rules,
    check_rule_keys,
    check_symbolizers,
    check_value_references,
]

ADVISORY_RULES = [
    check_scale_bounds,
    check_known_properties,
    check_unused_values,
]

ALL_RULES = STRUCTURAL_RULES + ADVISORY_RULES
