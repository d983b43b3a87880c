"""Error hierarchy for the style compiler."""
from __future__ import annotations


class StyleError(Exception):
    """Base error for everything raised while compiling a style document."""

    def __init__(
        self,
        message: str,
        *,
        location: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        if location:
            message = f"{message} (at {location})"
        super().__init__(message)
        self.location = location
        self.cause = cause


# ---------------------------------------------------------------------------
# Document structure
# ---------------------------------------------------------------------------


class MalformedDocument(StyleError):
    """The text is not valid JSON, or the JSON is not shaped like a style."""


class UnsupportedVersion(StyleError):
    """The ``version`` field names a dialect that is not supported.

    The compile path never raises this: an unknown version yields ``None`` so
    callers can fall back to loading the text as a URI.  Validation reports it.
    """


class InvalidFilterKey(StyleError):
    """A rule key is neither ``*`` nor a bracketed expression."""


class MissingRequiredProperty(StyleError):
    """A required property (``label``, ``type``, ``symbolizers``) is absent."""


class UnknownSymbolizerType(StyleError):
    """A symbolizer declares a ``type`` outside point/line/polygon/text."""


class InvalidPropertyValue(StyleError):
    """A property value cannot be converted to the type its symbolizer needs."""


class InvalidDashToken(InvalidPropertyValue):
    """A ``strokeDashstyle`` value is neither a keyword nor a number list."""


# ---------------------------------------------------------------------------
# Interpolation
# ---------------------------------------------------------------------------


class InterpolationError(StyleError):
    """Base class for ``${name}`` substitution failures."""


class UnresolvedValueReference(InterpolationError):
    """A ``${name}`` token names a value that is not declared."""

    def __init__(self, name: str, *, location: str | None = None) -> None:
        super().__init__(f"Unresolved value reference: ${{{name}}}", location=location)
        self.name = name


class MalformedInterpolationToken(InterpolationError):
    """A ``${`` without a closing brace, or with an illegal name inside."""


class RecursiveValueReference(InterpolationError):
    """A referenced value itself contains a ``${...}`` token."""

    def __init__(self, name: str, *, location: str | None = None) -> None:
        super().__init__(
            f"Value ${{{name}}} refers to another value; nested references are not supported",
            location=location,
        )
        self.name = name


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


class FilterParseError(StyleError):
    """Raised when ECQL filter or expression text cannot be parsed."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        *,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.line = line
        self.column = column


class ResourceAccessError(StyleError):
    """A relative resource reference escapes the configuration directory."""


class StyleLoadError(StyleError):
    """Fetching a style by URI failed, or the fetched content is malformed."""
