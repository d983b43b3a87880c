"""Check a style document against the structural and advisory rules."""

from __future__ import annotations

from typing import Callable

from mapstyle.model.diagnostic import Diagnostic
from mapstyle.model.document import StyleDocument
from mapstyle.validation.rules import ALL_RULES, check_compiles


class ValidationError(Exception):
    """The style document would not compile; ``diagnostics`` lists why."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        messages = [str(d) for d in diagnostics if d.is_error]
        super().__init__(
            f"Style has {len(messages)} error(s): " + "; ".join(messages)
        )


RuleFunc = Callable[[StyleDocument], list[Diagnostic]]


def validate(
    document: StyleDocument, extra_rules: list[RuleFunc] | None = None
) -> list[Diagnostic]:
    """Collect diagnostics for every rule key, symbolizer and ``${name}`` reference.

    When the key-level checks pass, the document is also run through the
    compiler so that bad property values (dash styles, colours, numbers)
    surface as a single ``compiles`` error.
    """
    rules: list[RuleFunc] = list(ALL_RULES)
    if extra_rules:
        rules.extend(extra_rules)
    diagnostics: list[Diagnostic] = []
    for rule in rules:
        diagnostics.extend(rule(document))
    if not any(d.is_error for d in diagnostics):
        diagnostics.extend(check_compiles(document))
    return diagnostics


def validate_or_raise(
    document: StyleDocument, extra_rules: list[RuleFunc] | None = None
) -> list[Diagnostic]:
    """Like :func:`validate`, but a style with errors raises :class:`ValidationError`.

    A style that would compile returns its warnings and info notes.
    """
    diagnostics = validate(document, extra_rules=extra_rules)
    errors = [d for d in diagnostics if d.is_error]
    if errors:
        raise ValidationError(errors)
    return diagnostics
