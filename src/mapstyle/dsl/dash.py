"""Dash-array compilation for ``strokeDashstyle``."""

from __future__ import annotations

import math
import re
from typing import Callable

from mapstyle.errors import InvalidDashToken

# Shortest visible dash; absolute, not scaled by the stroke width.
DOT_LENGTH = 0.1

DASH_STYLES: dict[str, Callable[[float], tuple[float, ...]]] = {
    "dot": lambda w: (DOT_LENGTH, 2 * w),
    "dash": lambda w: (2 * w, 2 * w),
    "dashdot": lambda w: (3 * w, 2 * w, DOT_LENGTH, 2 * w),
    "longdash": lambda w: (4 * w, 2 * w),
    "longdashdot": lambda w: (5 * w, 2 * w, DOT_LENGTH, 2 * w),
}

# Plain decimal literals only: no sign, exponent, "_" separators or nan/inf.
DASH_LENGTH_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def _dash_length(part: str, token: str) -> float:
    value = float(part) if DASH_LENGTH_RE.fullmatch(part) else math.nan
    if not math.isfinite(value):
        raise InvalidDashToken(
            f"Invalid strokeDashstyle {token!r}: expected one of "
            f"{', '.join(DASH_STYLES)} or space separated numbers"
        )
    return value


def compile_dash_array(token: str, stroke_width: float) -> tuple[float, ...]:
    """Map a dash keyword or a space separated list of numbers to a dash array.

    Keywords are matched exactly and scale with *stroke_width*; literal lists
    are used as given.
    """
    text = token.strip()
    style = DASH_STYLES.get(text)
    if style is not None:
        return style(stroke_width)

    parts = text.split()
    if not parts:
        raise InvalidDashToken(f"Empty strokeDashstyle {token!r}")
    return tuple(_dash_length(p, token) for p in parts)
