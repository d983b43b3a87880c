"""mapstyle -- compiler for JSON map-styling documents."""

__version__ = "0.1.0"

from mapstyle.config import StyleConfig  # noqa: E402
from mapstyle.errors import StyleError  # noqa: E402
from mapstyle.model.style import Rule, StyleModel  # noqa: E402
from mapstyle.parser import StyleParser, parse_style  # noqa: E402

__all__ = [
    "__version__",
    "Rule",
    "StyleConfig",
    "StyleError",
    "StyleModel",
    "StyleParser",
    "parse_style",
]
