"""Tests for style validation rules and the validator."""

import pytest

from mapstyle.model.diagnostic import Diagnostic, Severity
from mapstyle.model.document import StyleDocument
from mapstyle.validation import ValidationError, validate, validate_or_raise
from mapstyle.validation.rules import (
    check_compiles,
    check_has_rules,
    check_known_properties,
    check_rule_keys,
    check_scale_bounds,
    check_symbolizers,
    check_unused_values,
    check_value_references,
    check_version,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _v2(**entries) -> StyleDocument:
    return StyleDocument.from_mapping({"version": "2", **entries})


def _doc(data: dict) -> StyleDocument:
    return StyleDocument.from_mapping(data)


LINE_RULE = {"symbolizers": [{"type": "line"}]}


# ---------------------------------------------------------------------------
# check_version / check_has_rules
# ---------------------------------------------------------------------------


class TestCheckVersion:
    def test_supported(self) -> None:
        assert check_version(_doc({"version": "2"})) == []
        assert check_version(_doc({})) == []

    def test_unsupported(self) -> None:
        diags = check_version(_doc({"version": "3"}))
        assert len(diags) == 1
        assert diags[0].severity is Severity.ERROR
        assert diags[0].location == "version"


class TestCheckHasRules:
    def test_no_rules(self) -> None:
        diags = check_has_rules(_v2(val1="#000000"))
        assert [d.rule for d in diags] == ["has_rules"]

    def test_v1_with_rule(self) -> None:
        assert check_has_rules(_doc({"1": {"strokeColor": "#000000"}})) == []


# ---------------------------------------------------------------------------
# check_rule_keys
# ---------------------------------------------------------------------------


class TestCheckRuleKeys:
    def test_valid_keys(self) -> None:
        doc = _v2(**{"*": LINE_RULE, "[a > 1]": LINE_RULE})
        assert check_rule_keys(doc) == []

    def test_key_without_brackets(self) -> None:
        diags = check_rule_keys(_v2(**{"a > 1": LINE_RULE}))
        assert len(diags) == 1
        assert diags[0].location == "a > 1"

    def test_unparseable_filter(self) -> None:
        diags = check_rule_keys(_v2(**{"[a >]": LINE_RULE}))
        assert len(diags) == 1
        assert "Invalid ECQL" in diags[0].message

    def test_scalar_rule(self) -> None:
        diags = check_rule_keys(_v2(**{"[a > 1]": "red"}))
        assert diags[0].message == "A rule must map to an object"

    def test_ignored_for_v1(self) -> None:
        assert check_rule_keys(_doc({"version": "1", "a > 1": {}})) == []


# ---------------------------------------------------------------------------
# check_symbolizers
# ---------------------------------------------------------------------------


class TestCheckSymbolizers:
    def test_valid(self) -> None:
        assert check_symbolizers(_v2(**{"*": LINE_RULE})) == []

    def test_missing_array(self) -> None:
        diags = check_symbolizers(_v2(**{"*": {"strokeColor": "#000000"}}))
        assert diags[0].message == "Rule has no symbolizers"

    def test_unknown_type(self) -> None:
        diags = check_symbolizers(_v2(**{"*": {"symbolizers": [{"type": "raster"}]}}))
        assert diags[0].location == "*.symbolizers[0]"
        assert "raster" in diags[0].message

    def test_text_without_label(self) -> None:
        diags = check_symbolizers(_v2(**{"*": {"symbolizers": [{"type": "text"}]}}))
        assert diags[0].message == "Text symbolizer has no label"

    def test_text_label_inherited(self) -> None:
        doc = _v2(label="[name]", **{"*": {"symbolizers": [{"type": "text"}]}})
        assert check_symbolizers(doc) == []


# ---------------------------------------------------------------------------
# check_value_references
# ---------------------------------------------------------------------------


class TestCheckValueReferences:
    def test_declared(self) -> None:
        doc = _v2(c="#000000", **{"*": {"symbolizers": [{"type": "line", "strokeColor": "${c}"}]}})
        assert check_value_references(doc) == []

    def test_undeclared(self) -> None:
        doc = _v2(**{"*": {"symbolizers": [{"type": "line", "strokeColor": "${c}"}]}})
        diags = check_value_references(doc)
        assert len(diags) == 1
        assert diags[0].location == "*.symbolizers[0].strokeColor"
        assert diags[0].fix is not None

    def test_malformed_token(self) -> None:
        doc = _v2(**{"*": {"strokeColor": "${oops", **LINE_RULE}})
        diags = check_value_references(doc)
        assert "Malformed" in diags[0].message


# ---------------------------------------------------------------------------
# Advisory rules
# ---------------------------------------------------------------------------


class TestCheckScaleBounds:
    def test_inverted(self) -> None:
        doc = _v2(**{"*": {"minScale": 5000, "maxScale": 1000, **LINE_RULE}})
        diags = check_scale_bounds(doc)
        assert diags[0].severity is Severity.WARNING

    def test_ordered(self) -> None:
        doc = _v2(**{"*": {"minScale": 1000, "maxScale": 5000, **LINE_RULE}})
        assert check_scale_bounds(doc) == []

    def test_one_bound(self) -> None:
        assert check_scale_bounds(_v2(**{"*": {"minScale": 1000, **LINE_RULE}})) == []


class TestCheckKnownProperties:
    def test_unknown_symbolizer_property(self) -> None:
        doc = _v2(**{"*": {"symbolizers": [{"type": "line", "strokeColour": "#000000"}]}})
        diags = check_known_properties(doc)
        assert diags[0].location == "*.symbolizers[0].strokeColour"
        assert diags[0].severity is Severity.WARNING

    def test_v1_unknown(self) -> None:
        diags = check_known_properties(_doc({"1": {"colour": "red", "minScale": 1}}))
        assert [d.location for d in diags] == ["1.colour"]


class TestCheckUnusedValues:
    def test_unused(self) -> None:
        diags = check_unused_values(_v2(spare="#000000", **{"*": LINE_RULE}))
        assert diags[0].severity is Severity.INFO
        assert diags[0].location == "spare"

    def test_property_default_is_used(self) -> None:
        assert check_unused_values(_v2(strokeColor="#000000", **{"*": LINE_RULE})) == []


class TestCheckCompiles:
    def test_bad_value(self) -> None:
        doc = _v2(**{"*": {"symbolizers": [{"type": "line", "strokeWidth": "abc"}]}})
        diags = check_compiles(doc)
        assert len(diags) == 1
        assert diags[0].location == "*.symbolizers[0].strokeWidth"


# ---------------------------------------------------------------------------
# validate / validate_or_raise
# ---------------------------------------------------------------------------


class TestValidate:
    def test_clean_style(self) -> None:
        doc = _v2(val1="#FFA829", **{"*": {"symbolizers": [{"type": "line", "strokeColor": "${val1}"}]}})
        assert validate(doc) == []

    def test_compile_errors_reported(self) -> None:
        doc = _v2(**{"*": {"symbolizers": [{"type": "line", "strokeDashstyle": "wavy"}]}})
        assert [d.rule for d in validate(doc)] == ["compiles"]

    def test_compile_skipped_after_errors(self) -> None:
        doc = _v2(**{"*": {"symbolizers": [{"type": "raster"}]}})
        assert [d.rule for d in validate(doc)] == ["symbolizers"]

    def test_extra_rules(self) -> None:
        def no_polygons(document: StyleDocument) -> list[Diagnostic]:
            return [Diagnostic(rule="custom", severity=Severity.WARNING, message="hi")]

        diags = validate(_v2(**{"*": LINE_RULE}), extra_rules=[no_polygons])
        assert [d.rule for d in diags] == ["custom"]

    def test_validate_or_raise(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_or_raise(_doc({"version": "3"}))
        assert exc_info.value.diagnostics[0].rule == "version"

    def test_error_message_names_key_path(self) -> None:
        doc = _v2(**{"[a > 1]": {"symbolizers": [{"type": "raster"}]}})
        with pytest.raises(ValidationError) as exc_info:
            validate_or_raise(doc)
        message = str(exc_info.value)
        assert message.startswith("Style has 1 error(s): ERROR [[a > 1].symbolizers[0]]")

    def test_validate_or_raise_returns_warnings(self) -> None:
        doc = _v2(spare="x", **{"*": LINE_RULE})
        diags = validate_or_raise(doc)
        assert [d.severity for d in diags] == [Severity.INFO]


class TestDiagnosticStr:
    def test_format(self) -> None:
        d = Diagnostic(rule="r", severity=Severity.ERROR, message="bad", location="*")
        assert str(d) == "ERROR [*]: bad"
