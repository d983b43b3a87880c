"""Per-symbolizer property resolution.

Both dialects share one property vocabulary.  Each builder reads the
properties its symbolizer type understands from a :class:`LayeredProperties`
lookup, converts them to typed values and falls back to the built-in
defaults below when no layer sets a property.
"""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass, field

from mapstyle.dsl.dash import compile_dash_array
from mapstyle.dsl.defaults import LayeredProperties
from mapstyle.dsl.label import classify_label
from mapstyle.dsl.protocols import FilterParser, GraphicResolver
from mapstyle.ecql.parser import EcqlParser
from mapstyle.errors import InvalidDashToken, InvalidPropertyValue, MissingRequiredProperty
from mapstyle.model.style import (
    Fill,
    Font,
    Graphic,
    Halo,
    LineSymbolizer,
    PointSymbolizer,
    PolygonSymbolizer,
    Stroke,
    Symbolizer,
    TextSymbolizer,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

FILL_PROPERTIES = frozenset({"fillColor", "fillOpacity"})

STROKE_PROPERTIES = frozenset({
    "strokeColor",
    "strokeOpacity",
    "strokeWidth",
    "strokeLinecap",
    "strokeLinejoin",
    "strokeDashstyle",
})

POINT_PROPERTIES = FILL_PROPERTIES | STROKE_PROPERTIES | frozenset({
    "rotation",
    "externalGraphic",
    "graphicName",
    "graphicFormat",
    "graphicOpacity",
    "pointRadius",
})

LINE_PROPERTIES = STROKE_PROPERTIES

POLYGON_PROPERTIES = FILL_PROPERTIES | STROKE_PROPERTIES

TEXT_PROPERTIES = FILL_PROPERTIES | frozenset({
    "fontColor",
    "fontFamily",
    "fontSize",
    "fontStyle",
    "fontWeight",
    "haloColor",
    "haloOpacity",
    "haloRadius",
    "label",
    "labelAlign",
    "labelRotation",
    "labelXOffset",
    "labelYOffset",
})

VOCABULARY: dict[str, frozenset[str]] = {
    "point": POINT_PROPERTIES,
    "line": LINE_PROPERTIES,
    "polygon": POLYGON_PROPERTIES,
    "text": TEXT_PROPERTIES,
}

ALL_PROPERTIES = frozenset().union(*VOCABULARY.values())

# ---------------------------------------------------------------------------
# Built-in defaults
# ---------------------------------------------------------------------------

DEFAULT_FILL_COLOR = "#808080"
DEFAULT_STROKE_COLOR = "#000000"
DEFAULT_FONT_COLOR = "#000000"
DEFAULT_OPACITY = 1.0
DEFAULT_STROKE_WIDTH = 1.0
DEFAULT_LINECAP = "butt"
DEFAULT_LINEJOIN = "miter"
DEFAULT_GRAPHIC_NAME = "square"
DEFAULT_POINT_RADIUS = 3.0
DEFAULT_FONT_FAMILY = "sans-serif"
DEFAULT_FONT_SIZE = 10.0
DEFAULT_HALO_COLOR = "#FFFFFF"
DEFAULT_HALO_RADIUS = 1.0
DEFAULT_LABEL_ALIGN = "cm"

LINECAPS = frozenset({"butt", "round", "square"})
LINEJOINS = frozenset({"miter", "round", "bevel"})
FONT_STYLES = frozenset({"normal", "italic", "oblique"})
FONT_WEIGHTS = frozenset({"normal", "bold"})

_X_ANCHOR = {"l": 0.0, "c": 0.5, "r": 1.0}
_Y_ANCHOR = {"b": 0.0, "m": 0.5, "t": 1.0}


@dataclass(frozen=True)
class CompileContext:
    """Collaborators available while compiling one document."""

    filter_parser: FilterParser = field(default_factory=EcqlParser)
    graphic_resolver: GraphicResolver | None = None


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


def _where(props: LayeredProperties, name: str) -> str:
    return f"{props.location}.{name}" if props.location else name


def _number(props: LayeredProperties, name: str, default: float, suffix: str = "") -> float:
    raw = props.get(name)
    if raw is None or not raw.strip():
        return default
    text = raw.strip()
    if suffix and text.lower().endswith(suffix):
        text = text[: -len(suffix)].strip()
    try:
        return float(text)
    except ValueError:
        raise InvalidPropertyValue(
            f"{name} must be a number, got {raw!r}", location=_where(props, name)
        ) from None


def _text(props: LayeredProperties, name: str, default: str | None) -> str | None:
    raw = props.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _choice(props: LayeredProperties, name: str, default: str, allowed: frozenset[str]) -> str:
    value = (_text(props, name, default) or default).lower()
    if value not in allowed:
        raise InvalidPropertyValue(
            f"{name} must be one of {', '.join(sorted(allowed))}, got {value!r}",
            location=_where(props, name),
        )
    return value


def label_anchor(align: str, location: str | None = None) -> tuple[float, float]:
    """Translate a two letter ``labelAlign`` (x in l/c/r, y in b/m/t) to an anchor point."""
    code = align.strip().lower()
    if len(code) != 2 or code[0] not in _X_ANCHOR or code[1] not in _Y_ANCHOR:
        raise InvalidPropertyValue(
            f"labelAlign must be two letters, x in l/c/r and y in b/m/t, got {align!r}",
            location=location,
        )
    return _X_ANCHOR[code[0]], _Y_ANCHOR[code[1]]


# ---------------------------------------------------------------------------
# Parts
# ---------------------------------------------------------------------------


def build_fill(props: LayeredProperties, default_color: str = DEFAULT_FILL_COLOR) -> Fill:
    return Fill(
        color=_text(props, "fillColor", default_color) or default_color,
        opacity=_number(props, "fillOpacity", DEFAULT_OPACITY),
    )


def build_stroke(props: LayeredProperties) -> Stroke:
    width = _number(props, "strokeWidth", DEFAULT_STROKE_WIDTH)
    dash_style = _text(props, "strokeDashstyle", None)
    dash_array = None
    if dash_style is not None:
        try:
            dash_array = compile_dash_array(dash_style, width)
        except InvalidDashToken as e:
            raise InvalidDashToken(str(e), location=_where(props, "strokeDashstyle")) from None
    return Stroke(
        color=_text(props, "strokeColor", DEFAULT_STROKE_COLOR) or DEFAULT_STROKE_COLOR,
        opacity=_number(props, "strokeOpacity", DEFAULT_OPACITY),
        width=width,
        linecap=_choice(props, "strokeLinecap", DEFAULT_LINECAP, LINECAPS),
        linejoin=_choice(props, "strokeLinejoin", DEFAULT_LINEJOIN, LINEJOINS),
        dash_array=dash_array,
    )


# ---------------------------------------------------------------------------
# Symbolizers
# ---------------------------------------------------------------------------


def build_point(props: LayeredProperties, context: CompileContext) -> PointSymbolizer:
    external = _text(props, "externalGraphic", None)
    if external is not None and context.graphic_resolver is not None:
        external = context.graphic_resolver.resolve(external)
    graphic_format = _text(props, "graphicFormat", None)
    if external is not None and graphic_format is None:
        graphic_format = mimetypes.guess_type(external)[0]
    mark = _text(props, "graphicName", None)
    if mark is None and external is None:
        mark = DEFAULT_GRAPHIC_NAME
    graphic = Graphic(
        mark=mark,
        external=external,
        format=graphic_format,
        opacity=_number(props, "graphicOpacity", DEFAULT_OPACITY),
        size=2 * _number(props, "pointRadius", DEFAULT_POINT_RADIUS),
        rotation=_number(props, "rotation", 0.0),
        fill=build_fill(props),
        stroke=build_stroke(props),
    )
    return PointSymbolizer(graphic=graphic, properties=props.resolved(POINT_PROPERTIES))


def build_line(props: LayeredProperties, context: CompileContext) -> LineSymbolizer:
    return LineSymbolizer(stroke=build_stroke(props), properties=props.resolved(LINE_PROPERTIES))


def build_polygon(props: LayeredProperties, context: CompileContext) -> PolygonSymbolizer:
    return PolygonSymbolizer(
        fill=build_fill(props),
        stroke=build_stroke(props),
        properties=props.resolved(POLYGON_PROPERTIES),
    )


def build_text(props: LayeredProperties, context: CompileContext) -> TextSymbolizer:
    raw_label = props.get("label")
    if raw_label is None:
        raise MissingRequiredProperty(
            "A text symbolizer requires a 'label' property", location=props.location
        )
    label = classify_label(raw_label, context.filter_parser)

    font_color = _text(props, "fontColor", None)
    fill = build_fill(props, DEFAULT_FONT_COLOR)
    if font_color is not None:
        fill = Fill(color=font_color, opacity=fill.opacity)

    halo = None
    halo_color = _text(props, "haloColor", None)
    if halo_color is not None or "haloRadius" in props:
        halo = Halo(
            color=halo_color or DEFAULT_HALO_COLOR,
            opacity=_number(props, "haloOpacity", DEFAULT_OPACITY),
            radius=_number(props, "haloRadius", DEFAULT_HALO_RADIUS),
        )

    align = _text(props, "labelAlign", DEFAULT_LABEL_ALIGN) or DEFAULT_LABEL_ALIGN
    return TextSymbolizer(
        label=label,
        font=Font(
            family=_text(props, "fontFamily", DEFAULT_FONT_FAMILY) or DEFAULT_FONT_FAMILY,
            size=_number(props, "fontSize", DEFAULT_FONT_SIZE, suffix="px"),
            style=_choice(props, "fontStyle", "normal", FONT_STYLES),
            weight=_choice(props, "fontWeight", "normal", FONT_WEIGHTS),
        ),
        fill=fill,
        halo=halo,
        anchor=label_anchor(align, _where(props, "labelAlign")),
        displacement=(
            _number(props, "labelXOffset", 0.0),
            _number(props, "labelYOffset", 0.0),
        ),
        rotation=_number(props, "labelRotation", 0.0),
        properties=props.resolved(TEXT_PROPERTIES),
    )


BUILDERS = {
    "point": build_point,
    "line": build_line,
    "polygon": build_polygon,
    "text": build_text,
}


def build_symbolizer(
    symbolizer_type: str, props: LayeredProperties, context: CompileContext
) -> Symbolizer:
    logger.debug("Building %s symbolizer at %s", symbolizer_type, props.location)
    return BUILDERS[symbolizer_type](props, context)


def parse_scale(raw: str | None, location: str | None = None) -> float | None:
    """Parse an optional ``minScale`` / ``maxScale`` denominator."""
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw.strip())
    except ValueError:
        raise InvalidPropertyValue(
            f"Scale denominator must be a number, got {raw!r}", location=location
        ) from None
