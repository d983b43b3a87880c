"""Lark Transformer that converts an ECQL parse tree into filter/expression nodes."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError, VisitError

from mapstyle.ecql.ast import (
    And,
    Arithmetic,
    Attribute,
    Between,
    Comparison,
    Exclude,
    Expression,
    Filter,
    Function,
    Include,
    InList,
    IsNull,
    Like,
    Literal,
    Negative,
    Not,
    Or,
)
from mapstyle.errors import FilterParseError

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"


class EcqlTransformer(Transformer):  # type: ignore[type-arg]
    """Transform a Lark parse tree into :mod:`mapstyle.ecql.ast` nodes."""

    # ---- atoms ----

    def number(self, items: list[Token]) -> Literal:
        raw = str(items[0])
        if any(c in raw for c in ".eE"):
            return Literal(float(raw))
        return Literal(int(raw))

    def string(self, items: list[Token]) -> Literal:
        raw = str(items[0])
        return Literal(raw[1:-1].replace("''", "'"))

    def true(self, items: list[Token]) -> Literal:
        return Literal(True)

    def false(self, items: list[Token]) -> Literal:
        return Literal(False)

    def attribute(self, items: list[Token]) -> Attribute:
        return Attribute(str(items[0]))

    def quoted_attribute(self, items: list[Token]) -> Attribute:
        raw = str(items[0])
        return Attribute(raw[1:-1].replace('""', '"'))

    def expression_list(self, items: list[Expression]) -> tuple[Expression, ...]:
        return tuple(items)

    def function(self, items: list[object]) -> Function:
        name = str(items[0])
        args = items[1] if len(items) > 1 and items[1] is not None else ()
        return Function(name, tuple(args))  # type: ignore[arg-type]

    def negative(self, items: list[object]) -> Negative:
        return Negative(items[1])  # type: ignore[arg-type]

    def arithmetic(self, items: list[object]) -> Arithmetic:
        left, op, right = items
        return Arithmetic(str(op), left, right)  # type: ignore[arg-type]

    # ---- predicates ----

    def comparison(self, items: list[object]) -> Comparison:
        left, op, right = items
        operator = "<>" if str(op) == "!=" else str(op)
        return Comparison(operator, left, right)  # type: ignore[arg-type]

    def like(self, items: list[Expression]) -> Like:
        return Like(items[0], items[1])

    def not_like(self, items: list[Expression]) -> Like:
        return Like(items[0], items[1], negated=True)

    def ilike(self, items: list[Expression]) -> Like:
        return Like(items[0], items[1], case_insensitive=True)

    def not_ilike(self, items: list[Expression]) -> Like:
        return Like(items[0], items[1], negated=True, case_insensitive=True)

    def between(self, items: list[Expression]) -> Between:
        return Between(items[0], items[1], items[2])

    def not_between(self, items: list[Expression]) -> Between:
        return Between(items[0], items[1], items[2], negated=True)

    def in_list(self, items: list[object]) -> InList:
        return InList(items[0], items[1])  # type: ignore[arg-type]

    def not_in_list(self, items: list[object]) -> InList:
        return InList(items[0], items[1], negated=True)  # type: ignore[arg-type]

    def is_null(self, items: list[Expression]) -> IsNull:
        return IsNull(items[0])

    def is_not_null(self, items: list[Expression]) -> IsNull:
        return IsNull(items[0], negated=True)

    def include(self, items: list[object]) -> Include:
        return Include()

    def exclude(self, items: list[object]) -> Exclude:
        return Exclude()

    # ---- logical ----

    def negation(self, items: list[Filter]) -> Not:
        return Not(items[0])

    def and_filter(self, items: list[Filter]) -> And:
        return And(tuple(items))

    def or_filter(self, items: list[Filter]) -> Or:
        return Or(tuple(items))


@lru_cache(maxsize=1)
def _parser() -> Lark:
    """Build the LALR parser once; Lark parsers are reusable across threads."""
    return Lark(
        GRAMMAR_PATH.read_text(encoding="utf-8"),
        parser="lalr",
        start=["filter", "expression"],
    )


def _parse(text: str, start: str) -> object:
    try:
        tree = _parser().parse(text, start=start)
        return EcqlTransformer().transform(tree)
    except VisitError as e:
        raise FilterParseError(f"Invalid ECQL {start} {text!r}: {e.orig_exc}", cause=e) from e
    except LarkError as e:
        line = getattr(e, "line", None)
        column = getattr(e, "column", None)
        raise FilterParseError(
            f"Invalid ECQL {start} {text!r}: {e}", line=line, column=column, cause=e
        ) from e


def parse_filter(text: str) -> Filter:
    """Parse ECQL filter text such as ``population > 300 AND name LIKE 'A%'``."""
    result = _parse(text, "filter")
    if not isinstance(result, Filter):
        raise FilterParseError(f"Not a filter expression: {text!r}")
    return result


def parse_expression(text: str) -> Expression:
    """Parse ECQL value-expression text such as ``name`` or ``strToUpperCase(name)``."""
    result = _parse(text, "expression")
    if not isinstance(result, Expression):
        raise FilterParseError(f"Not a value expression: {text!r}")
    return result


class EcqlParser:
    """Default filter-parser collaborator backed by the bundled Lark grammar."""

    def parse_filter(self, text: str) -> Filter:
        return parse_filter(text)

    def parse_expression(self, text: str) -> Expression:
        return parse_expression(text)
