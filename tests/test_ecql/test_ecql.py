"""Tests for the ECQL filter and expression parser."""

import pytest

from mapstyle.ecql import EcqlParser, parse_expression, parse_filter
from mapstyle.ecql.ast import (
    And,
    Arithmetic,
    Attribute,
    Between,
    Comparison,
    Exclude,
    Function,
    Include,
    InList,
    IsNull,
    Like,
    Literal,
    Negative,
    Not,
    Or,
    like_to_regex,
)
from mapstyle.errors import FilterParseError


# ---------------------------------------------------------------------------
# Comparisons and literals
# ---------------------------------------------------------------------------


class TestComparison:
    def test_numeric_comparison(self) -> None:
        f = parse_filter("population > 300")
        assert f == Comparison(">", Attribute("population"), Literal(300))

    def test_string_literal(self) -> None:
        f = parse_filter("name = 'Paris'")
        assert f == Comparison("=", Attribute("name"), Literal("Paris"))

    def test_escaped_quote_in_string(self) -> None:
        f = parse_filter("name = 'It''s'")
        assert f.right == Literal("It's")

    def test_float_literal(self) -> None:
        f = parse_filter("ratio <= 0.5")
        assert f == Comparison("<=", Attribute("ratio"), Literal(0.5))

    def test_bang_equals_normalised(self) -> None:
        assert parse_filter("a != 1").operator == "<>"

    def test_boolean_literal(self) -> None:
        assert parse_filter("visible = true").right == Literal(True)

    def test_quoted_attribute(self) -> None:
        f = parse_filter('"road class" = 1')
        assert f.left == Attribute("road class")

    def test_namespaced_attribute(self) -> None:
        assert parse_filter("gml:name = 'x'").left == Attribute("gml:name")

    def test_keyword_prefix_is_attribute(self) -> None:
        f = parse_filter("notes = 'x' and island = 1")
        assert f == And((
            Comparison("=", Attribute("notes"), Literal("x")),
            Comparison("=", Attribute("island"), Literal(1)),
        ))


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


class TestPredicates:
    def test_like(self) -> None:
        assert parse_filter("name LIKE 'A%'") == Like(Attribute("name"), Literal("A%"))

    def test_not_like(self) -> None:
        f = parse_filter("name NOT LIKE 'A%'")
        assert f == Like(Attribute("name"), Literal("A%"), negated=True)

    def test_ilike(self) -> None:
        assert parse_filter("name ILIKE 'a%'").case_insensitive is True

    def test_between(self) -> None:
        f = parse_filter("pop BETWEEN 1 AND 5")
        assert f == Between(Attribute("pop"), Literal(1), Literal(5))

    def test_between_followed_by_and(self) -> None:
        f = parse_filter("pop BETWEEN 1 AND 5 AND kind = 'city'")
        assert isinstance(f, And)
        assert f.operands[0] == Between(Attribute("pop"), Literal(1), Literal(5))

    def test_in_list(self) -> None:
        f = parse_filter("kind IN ('a', 'b')")
        assert f == InList(Attribute("kind"), (Literal("a"), Literal("b")))

    def test_not_in_list(self) -> None:
        assert parse_filter("kind NOT IN (1, 2)").negated is True

    def test_is_null(self) -> None:
        assert parse_filter("name IS NULL") == IsNull(Attribute("name"))

    def test_is_not_null(self) -> None:
        assert parse_filter("name IS NOT NULL") == IsNull(Attribute("name"), negated=True)

    def test_include_exclude(self) -> None:
        assert parse_filter("INCLUDE") == Include()
        assert parse_filter("exclude") == Exclude()


# ---------------------------------------------------------------------------
# Logical operators
# ---------------------------------------------------------------------------


class TestLogical:
    def test_and_binds_tighter_than_or(self) -> None:
        f = parse_filter("a = 1 AND b = 2 OR c = 3")
        assert isinstance(f, Or)
        assert isinstance(f.operands[0], And)

    def test_parentheses(self) -> None:
        f = parse_filter("a = 1 AND (b = 2 OR c = 3)")
        assert isinstance(f, And)
        assert isinstance(f.operands[1], Or)

    def test_not(self) -> None:
        f = parse_filter("NOT name LIKE 'A%'")
        assert f == Not(Like(Attribute("name"), Literal("A%")))

    def test_case_insensitive_keywords(self) -> None:
        assert parse_filter("a = 1 and b = 2") == parse_filter("a = 1 AND b = 2")


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


class TestExpressions:
    def test_attribute(self) -> None:
        assert parse_expression("name") == Attribute("name")

    def test_function(self) -> None:
        e = parse_expression("strToUpperCase(name)")
        assert e == Function("strToUpperCase", (Attribute("name"),))

    def test_function_without_arguments(self) -> None:
        assert parse_expression("pi()") == Function("pi", ())

    def test_arithmetic_precedence(self) -> None:
        e = parse_expression("a + b * 2")
        assert e == Arithmetic("+", Attribute("a"), Arithmetic("*", Attribute("b"), Literal(2)))

    def test_negative(self) -> None:
        assert parse_expression("-5") == Negative(Literal(5))


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


class TestEvaluate:
    def test_comparison(self) -> None:
        f = parse_filter("population > 300")
        assert f.evaluate({"population": 500}) is True
        assert f.evaluate({"population": 100}) is False

    def test_missing_attribute_is_false(self) -> None:
        assert parse_filter("population > 300").evaluate({}) is False

    def test_numeric_string_coercion(self) -> None:
        assert parse_filter("code = '1'").evaluate({"code": 1}) is True

    def test_arithmetic(self) -> None:
        assert parse_filter("a * 2 + 1 = 7").evaluate({"a": 3}) is True

    def test_negative_literal(self) -> None:
        assert parse_filter("t < -5").evaluate({"t": -10}) is True

    def test_like(self) -> None:
        f = parse_filter("name LIKE 'Pa%'")
        assert f.evaluate({"name": "Paris"}) is True
        assert f.evaluate({"name": "Lyon"}) is False

    def test_ilike(self) -> None:
        assert parse_filter("name ILIKE 'pa_is'").evaluate({"name": "PARIS"}) is True

    def test_between_inclusive(self) -> None:
        f = parse_filter("pop BETWEEN 1 AND 5")
        assert f.evaluate({"pop": 1}) is True
        assert f.evaluate({"pop": 5}) is True
        assert f.evaluate({"pop": 6}) is False

    def test_in_list(self) -> None:
        f = parse_filter("kind IN ('a', 'b')")
        assert f.evaluate({"kind": "b"}) is True
        assert f.evaluate({"kind": "c"}) is False

    def test_is_null(self) -> None:
        assert parse_filter("name IS NULL").evaluate({}) is True
        assert parse_filter("name IS NOT NULL").evaluate({"name": "x"}) is True

    def test_or_not(self) -> None:
        f = parse_filter("NOT (a = 1 OR b = 2)")
        assert f.evaluate({"a": 3, "b": 4}) is True
        assert f.evaluate({"a": 1}) is False

    def test_function_value(self) -> None:
        assert parse_expression("strToUpperCase(name)").evaluate({"name": "ab"}) == "AB"

    def test_concat(self) -> None:
        e = parse_expression("strConcat(name, ' (', code, ')')")
        assert e.evaluate({"name": "Paris", "code": 75}) == "Paris (75)"

    def test_division_by_zero_is_null(self) -> None:
        assert parse_expression("a / 0").evaluate({"a": 1}) is None

    def test_unknown_function_is_null(self) -> None:
        assert parse_expression("centroid(geomAtt)").evaluate({"geomAtt": "POINT(0 0)"}) is None

    def test_unknown_function_in_filter(self) -> None:
        assert parse_filter("env('java.home') = '/opt'").evaluate({}) is False


# ---------------------------------------------------------------------------
# Round trip through to_ecql
# ---------------------------------------------------------------------------


class TestToEcql:
    @pytest.mark.parametrize(
        "text",
        [
            "population > 300",
            "name = 'It''s'",
            "a = 1 AND (b = 2 OR NOT c IS NULL)",
            "name NOT ILIKE 'x_%'",
            "pop NOT BETWEEN 1.5 AND 10",
            "kind IN ('a', 'b', 3)",
            '"road class" <> -1',
            "strToUpperCase(name) = 'A' OR a * (b + 1) >= 4",
        ],
    )
    def test_reparses_to_equal_filter(self, text: str) -> None:
        f = parse_filter(text)
        assert parse_filter(f.to_ecql()) == f


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_incomplete_comparison(self) -> None:
        with pytest.raises(FilterParseError):
            parse_filter("population >")

    def test_unterminated_string(self) -> None:
        with pytest.raises(FilterParseError):
            parse_filter("name = 'Paris")

    def test_bare_attribute_is_not_a_filter(self) -> None:
        with pytest.raises(FilterParseError):
            parse_filter("name")

    def test_error_carries_position(self) -> None:
        with pytest.raises(FilterParseError) as exc_info:
            parse_filter("a = 1 AND AND b = 2")
        assert exc_info.value.line == 1
        assert exc_info.value.column is not None

    def test_empty_text(self) -> None:
        with pytest.raises(FilterParseError):
            parse_filter("")


class TestLikeToRegex:
    def test_wildcards(self) -> None:
        assert like_to_regex("A%_") == "A.*."

    def test_escapes_regex_characters(self) -> None:
        assert like_to_regex("a.b") == r"a\.b"


class TestEcqlParser:
    def test_collaborator_delegates(self) -> None:
        parser = EcqlParser()
        assert parser.parse_filter("a = 1") == parse_filter("a = 1")
        assert parser.parse_expression("name") == Attribute("name")
