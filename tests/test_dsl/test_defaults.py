"""Tests for layered default resolution."""

import pytest

from mapstyle.dsl.defaults import LayeredProperties, resolve_default
from mapstyle.dsl.values import ValueDictionary
from mapstyle.errors import UnresolvedValueReference


# ---------------------------------------------------------------------------
# resolve_default
# ---------------------------------------------------------------------------


class TestResolveDefault:
    def test_symbolizer_wins(self) -> None:
        value = resolve_default(
            "strokeWidth", {"strokeWidth": "5"}, {"strokeWidth": "3"}, {"strokeWidth": "1"}
        )
        assert value == "1"

    def test_rule_over_style(self) -> None:
        value = resolve_default("strokeWidth", {"strokeWidth": "5"}, {"strokeWidth": "3"}, {})
        assert value == "3"

    def test_style_fallback(self) -> None:
        assert resolve_default("strokeWidth", {"strokeWidth": "5"}, {}, {}) == "5"

    def test_absent_everywhere(self) -> None:
        assert resolve_default("strokeWidth", {}, {}, {}) is None

    def test_empty_string_is_set(self) -> None:
        assert resolve_default("label", {"label": "x"}, {}, {"label": ""}) == ""


# ---------------------------------------------------------------------------
# LayeredProperties
# ---------------------------------------------------------------------------


class TestLayeredProperties:
    def test_most_specific_first(self) -> None:
        props = LayeredProperties([{"a": "1"}, {"a": "2", "b": "3"}])
        assert props.get("a") == "1"
        assert props.get("b") == "3"

    def test_interpolates(self) -> None:
        values = ValueDictionary.from_items([("c", "#FFA829")])
        props = LayeredProperties([{"strokeColor": "${c}"}], values)
        assert props.get("strokeColor") == "#FFA829"
        assert props.raw("strokeColor") == "${c}"

    def test_interpolation_disabled(self) -> None:
        props = LayeredProperties([{"label": "${name}"}], interpolate_values=False)
        assert props.get("label") == "${name}"

    def test_unresolved_reports_property_location(self) -> None:
        props = LayeredProperties([{"strokeColor": "${c}"}], location="*.symbolizers[0]")
        with pytest.raises(UnresolvedValueReference) as exc_info:
            props.get("strokeColor")
        assert exc_info.value.location == "*.symbolizers[0].strokeColor"

    def test_contains_and_names(self) -> None:
        props = LayeredProperties([{"a": "1"}, {"b": "2"}])
        assert "b" in props
        assert "c" not in props
        assert props.names() == {"a", "b"}

    def test_resolved_only_set_names(self) -> None:
        props = LayeredProperties([{"a": "1"}, {"b": "2", "x": "9"}])
        assert props.resolved({"a", "b", "c"}) == {"a": "1", "b": "2"}

    def test_unreferenced_bad_value_is_ignored(self) -> None:
        # Only values that are read get interpolated.
        props = LayeredProperties([{"a": "1"}, {"junk": "${nope}"}])
        assert props.resolved({"a"}) == {"a": "1"}
