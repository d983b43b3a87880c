"""Expression and filter nodes produced by the ECQL parser.

Every node is a frozen dataclass with two operations:

- ``evaluate(feature)`` computes the node against a feature, given as a
  mapping of attribute name to value.  Missing attributes and functions
  outside the built-in table evaluate to None.
- ``to_ecql()`` renders the node back to ECQL text that parses to an equal node.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping

Feature = Mapping[str, Any]


def _quote_string(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _compare_values(left: Any, right: Any) -> tuple[Any, Any]:
    """Bring two operands to a common type for ordering and equality."""
    ln, rn = _as_number(left), _as_number(right)
    if ln is not None and rn is not None:
        return ln, rn
    return str(left), str(right)


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


class Expression:
    """Base class for value-producing nodes."""

    def evaluate(self, feature: Feature) -> Any:
        raise NotImplementedError

    def to_ecql(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.to_ecql()


@dataclass(frozen=True)
class Literal(Expression):
    value: Any

    def evaluate(self, feature: Feature) -> Any:
        return self.value

    def to_ecql(self) -> str:
        if isinstance(self.value, bool):
            return "TRUE" if self.value else "FALSE"
        if isinstance(self.value, (int, float)):
            return repr(self.value)
        return _quote_string(str(self.value))


@dataclass(frozen=True)
class Attribute(Expression):
    name: str

    def evaluate(self, feature: Feature) -> Any:
        return feature.get(self.name)

    def to_ecql(self) -> str:
        if re.fullmatch(r"[A-Za-z_][A-Za-z0-9_.:]*", self.name):
            return self.name
        return '"' + self.name.replace('"', '""') + '"'


@dataclass(frozen=True)
class Negative(Expression):
    operand: Expression

    def evaluate(self, feature: Feature) -> Any:
        value = _as_number(self.operand.evaluate(feature))
        return None if value is None else -value

    def to_ecql(self) -> str:
        return f"-{self.operand.to_ecql()}"


_ARITHMETIC: dict[str, Callable[[float, float], float]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": lambda a, b: a / b,
}


@dataclass(frozen=True)
class Arithmetic(Expression):
    operator: str
    left: Expression
    right: Expression

    def evaluate(self, feature: Feature) -> Any:
        a = _as_number(self.left.evaluate(feature))
        b = _as_number(self.right.evaluate(feature))
        if a is None or b is None:
            return None
        if self.operator == "/" and b == 0:
            return None
        return _ARITHMETIC[self.operator](a, b)

    def to_ecql(self) -> str:
        return f"({self.left.to_ecql()} {self.operator} {self.right.to_ecql()})"


def _str_concat(*args: Any) -> str:
    return "".join("" if a is None else str(a) for a in args)


def _numeric(fn: Callable[[float], Any]) -> Callable[[Any], Any]:
    def wrapper(value: Any) -> Any:
        number = _as_number(value)
        return None if number is None else fn(number)

    return wrapper


# Built-in function table, keyed by lower-cased name.
FUNCTIONS: dict[str, Callable[..., Any]] = {
    "strconcat": _str_concat,
    "concatenate": _str_concat,
    "strtouppercase": lambda s: None if s is None else str(s).upper(),
    "strtolowercase": lambda s: None if s is None else str(s).lower(),
    "strtrim": lambda s: None if s is None else str(s).strip(),
    "strlength": lambda s: 0 if s is None else len(str(s)),
    "strsubstring": lambda s, b, e: None if s is None else str(s)[int(b):int(e)],
    "abs": _numeric(abs),
    "floor": _numeric(math.floor),
    "ceil": _numeric(math.ceil),
    "round": _numeric(round),
    "sqrt": _numeric(math.sqrt),
    "min": lambda a, b: min(_compare_values(a, b)),
    "max": lambda a, b: max(_compare_values(a, b)),
}


@dataclass(frozen=True)
class Function(Expression):
    name: str
    args: tuple[Expression, ...] = ()

    def evaluate(self, feature: Feature) -> Any:
        impl = FUNCTIONS.get(self.name.lower())
        if impl is None:
            return None
        return impl(*(arg.evaluate(feature) for arg in self.args))

    def to_ecql(self) -> str:
        return f"{self.name}({', '.join(a.to_ecql() for a in self.args)})"


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class Filter:
    """Base class for predicate nodes."""

    def evaluate(self, feature: Feature) -> bool:
        raise NotImplementedError

    def to_ecql(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.to_ecql()


@dataclass(frozen=True)
class Include(Filter):
    def evaluate(self, feature: Feature) -> bool:
        return True

    def to_ecql(self) -> str:
        return "INCLUDE"


@dataclass(frozen=True)
class Exclude(Filter):
    def evaluate(self, feature: Feature) -> bool:
        return False

    def to_ecql(self) -> str:
        return "EXCLUDE"


@dataclass(frozen=True)
class Comparison(Filter):
    operator: str  # one of = <> < <= > >=; "!=" is normalised to "<>"
    left: Expression
    right: Expression

    def evaluate(self, feature: Feature) -> bool:
        lhs = self.left.evaluate(feature)
        rhs = self.right.evaluate(feature)
        if lhs is None or rhs is None:
            return False
        a, b = _compare_values(lhs, rhs)
        if self.operator == "=":
            return a == b
        if self.operator == "<>":
            return a != b
        if self.operator == "<":
            return a < b
        if self.operator == "<=":
            return a <= b
        if self.operator == ">":
            return a > b
        if self.operator == ">=":
            return a >= b
        raise ValueError(f"Unknown comparison operator: {self.operator!r}")

    def to_ecql(self) -> str:
        return f"{self.left.to_ecql()} {self.operator} {self.right.to_ecql()}"


def like_to_regex(pattern: str) -> str:
    """Translate an SQL LIKE pattern (``%`` and ``_`` wildcards) to a regex."""
    parts: list[str] = []
    for ch in pattern:
        if ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return "".join(parts)


@dataclass(frozen=True)
class Like(Filter):
    expression: Expression
    pattern: Expression
    negated: bool = False
    case_insensitive: bool = False

    def evaluate(self, feature: Feature) -> bool:
        value = self.expression.evaluate(feature)
        pattern = self.pattern.evaluate(feature)
        if value is None or pattern is None:
            return False
        flags = re.IGNORECASE if self.case_insensitive else 0
        matched = re.fullmatch(like_to_regex(str(pattern)), str(value), flags) is not None
        return matched != self.negated

    def to_ecql(self) -> str:
        keyword = "ILIKE" if self.case_insensitive else "LIKE"
        if self.negated:
            keyword = "NOT " + keyword
        return f"{self.expression.to_ecql()} {keyword} {self.pattern.to_ecql()}"


@dataclass(frozen=True)
class Between(Filter):
    expression: Expression
    lower: Expression
    upper: Expression
    negated: bool = False

    def evaluate(self, feature: Feature) -> bool:
        value = self.expression.evaluate(feature)
        low = self.lower.evaluate(feature)
        high = self.upper.evaluate(feature)
        if value is None or low is None or high is None:
            return False
        v, lo = _compare_values(value, low)
        v2, hi = _compare_values(value, high)
        inside = lo <= v and v2 <= hi
        return inside != self.negated

    def to_ecql(self) -> str:
        keyword = "NOT BETWEEN" if self.negated else "BETWEEN"
        return (
            f"{self.expression.to_ecql()} {keyword} "
            f"{self.lower.to_ecql()} AND {self.upper.to_ecql()}"
        )


@dataclass(frozen=True)
class InList(Filter):
    expression: Expression
    candidates: tuple[Expression, ...]
    negated: bool = False

    def evaluate(self, feature: Feature) -> bool:
        value = self.expression.evaluate(feature)
        if value is None:
            return False
        found = False
        for candidate in self.candidates:
            a, b = _compare_values(value, candidate.evaluate(feature))
            if a == b:
                found = True
                break
        return found != self.negated

    def to_ecql(self) -> str:
        keyword = "NOT IN" if self.negated else "IN"
        items = ", ".join(c.to_ecql() for c in self.candidates)
        return f"{self.expression.to_ecql()} {keyword} ({items})"


@dataclass(frozen=True)
class IsNull(Filter):
    expression: Expression
    negated: bool = False

    def evaluate(self, feature: Feature) -> bool:
        return (self.expression.evaluate(feature) is None) != self.negated

    def to_ecql(self) -> str:
        keyword = "IS NOT NULL" if self.negated else "IS NULL"
        return f"{self.expression.to_ecql()} {keyword}"


@dataclass(frozen=True)
class And(Filter):
    operands: tuple[Filter, ...]

    def evaluate(self, feature: Feature) -> bool:
        return all(op.evaluate(feature) for op in self.operands)

    def to_ecql(self) -> str:
        return "(" + " AND ".join(op.to_ecql() for op in self.operands) + ")"


@dataclass(frozen=True)
class Or(Filter):
    operands: tuple[Filter, ...]

    def evaluate(self, feature: Feature) -> bool:
        return any(op.evaluate(feature) for op in self.operands)

    def to_ecql(self) -> str:
        return "(" + " OR ".join(op.to_ecql() for op in self.operands) + ")"


@dataclass(frozen=True)
class Not(Filter):
    operand: Filter

    def evaluate(self, feature: Feature) -> bool:
        return not self.operand.evaluate(feature)

    def to_ecql(self) -> str:
        return f"NOT ({self.operand.to_ecql()})"
