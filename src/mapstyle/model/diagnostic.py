"""Findings reported when a JSON style document is checked before compiling."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(Enum):
    """ERROR blocks compilation; WARNING and INFO only flag suspicious keys."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


@dataclass(frozen=True)
class Diagnostic:
    """One problem found in a style document.

    ``rule`` names the check that fired (``version``, ``symbolizers``,
    ``compiles`` ...).  ``location`` is the key path of the offending entry,
    for example ``[a > 1].symbolizers[0]`` or ``val1`` for a top-level
    value, and stays ``None`` for problems with the document as a whole.
    ``fix`` holds a replacement the author can paste in, when one exists.
    """

    rule: str
    severity: Severity
    message: str
    location: str | None = None
    fix: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def __str__(self) -> str:
        location = f" [{self.location}]" if self.location else ""
        return f"{self.severity.value}{location}: {self.message}"
