from mapstyle.ecql.ast import Expression, Filter, Include
from mapstyle.ecql.parser import EcqlParser, parse_expression, parse_filter

__all__ = [
    "EcqlParser",
    "Expression",
    "Filter",
    "Include",
    "parse_expression",
    "parse_filter",
]
