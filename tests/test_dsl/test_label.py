"""Tests for label classification."""

import pytest

from mapstyle.dsl.label import classify_label, label_expression
from mapstyle.ecql import EcqlParser
from mapstyle.errors import FilterParseError
from mapstyle.model.style import ExpressionLabel, LiteralLabel


class TestLabelExpression:
    def test_bracketed(self) -> None:
        assert label_expression("[name]") == "name"

    def test_trimmed_before_check(self) -> None:
        assert label_expression("  [name] ") == "name"

    def test_literal(self) -> None:
        assert label_expression("Static Label") is None

    def test_partial_brackets_are_literal(self) -> None:
        assert label_expression("[name") is None
        assert label_expression("a [b]") is None


class TestClassifyLabel:
    def test_literal(self) -> None:
        label = classify_label("Static Label", EcqlParser())
        assert label == LiteralLabel("Static Label")
        assert label.render({"name": "x"}) == "Static Label"

    def test_literal_keeps_whitespace(self) -> None:
        assert classify_label("  padded ", EcqlParser()) == LiteralLabel("  padded ")

    def test_expression(self) -> None:
        label = classify_label("[name]", EcqlParser())
        assert isinstance(label, ExpressionLabel)
        assert label.source == "name"
        assert label.render({"name": "Paris"}) == "Paris"

    def test_expression_missing_attribute_renders_empty(self) -> None:
        assert classify_label("[name]", EcqlParser()).render({}) == ""

    def test_function_expression(self) -> None:
        label = classify_label("[strToUpperCase(name)]", EcqlParser())
        assert label.render({"name": "lyon"}) == "LYON"

    def test_unknown_function_renders_empty(self) -> None:
        label = classify_label("[env('java.home')]", EcqlParser())
        assert isinstance(label, ExpressionLabel)
        assert label.render({}) == ""

    def test_invalid_expression(self) -> None:
        with pytest.raises(FilterParseError):
            classify_label("[name =]", EcqlParser())
