"""StyleDocument: a parsed JSON style plus its declared dialect version."""

from __future__ import annotations

import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from mapstyle.errors import MalformedDocument

VERSION_KEY = "version"
DEFAULT_VERSION = "1"

# propertyName -> raw (pre-interpolation) string value
PropertyBag = Mapping[str, str]


def raw_string(value: Any) -> str | None:
    """Render a JSON scalar the way it is written in the document.

    Strings are returned as-is, numbers and booleans in JSON notation, and
    ``null`` as None (absent).
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value)


def is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


@dataclass(frozen=True)
class StyleDocument:
    """An immutable style document; ``version`` is read once at construction."""

    data: Mapping[str, Any]
    version: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> StyleDocument:
        version = raw_string(data.get(VERSION_KEY))
        return cls(
            data=MappingProxyType(dict(data)),
            version=DEFAULT_VERSION if version is None else version,
        )

    @classmethod
    def from_text(cls, text: str) -> StyleDocument:
        """Parse JSON text into a document; the top level must be an object."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedDocument(
                f"Style is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
                location="style",
                cause=e,
            ) from e
        except RecursionError as e:
            raise MalformedDocument(
                "Style JSON is nested too deeply", location="style", cause=e
            ) from e
        if not isinstance(data, dict):
            raise MalformedDocument("Style JSON must be an object", location="style")
        return cls.from_mapping(data)

    def items(self) -> list[tuple[str, Any]]:
        """Top-level entries other than ``version``, in document order."""
        return [(k, v) for k, v in self.data.items() if k != VERSION_KEY]
