"""Collaborator protocols used by the compilers."""

from __future__ import annotations

from typing import Protocol

from mapstyle.ecql.ast import Expression, Filter


class FilterParser(Protocol):
    """Turns ECQL text into filter predicates and value expressions."""

    def parse_filter(self, text: str) -> Filter: ...

    def parse_expression(self, text: str) -> Expression: ...


class GraphicResolver(Protocol):
    """Turns an ``externalGraphic`` reference into a URL or absolute path."""

    def resolve(self, reference: str) -> str: ...
