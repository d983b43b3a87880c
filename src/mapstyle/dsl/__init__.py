from mapstyle.dsl.dash import compile_dash_array
from mapstyle.dsl.defaults import LayeredProperties, resolve_default
from mapstyle.dsl.dispatcher import Version, compile_document, try_load_json
from mapstyle.dsl.filter_key import format_filter_key, parse_filter_key
from mapstyle.dsl.label import classify_label
from mapstyle.dsl.properties import CompileContext
from mapstyle.dsl.values import ValueDictionary, interpolate

__all__ = [
    "CompileContext",
    "LayeredProperties",
    "ValueDictionary",
    "Version",
    "classify_label",
    "compile_dash_array",
    "compile_document",
    "format_filter_key",
    "interpolate",
    "parse_filter_key",
    "resolve_default",
    "try_load_json",
]
