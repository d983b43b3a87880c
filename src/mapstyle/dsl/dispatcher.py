"""Version dispatch: pick the compiler for a document's declared dialect."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from mapstyle.dsl.properties import CompileContext
from mapstyle.dsl.version1 import compile_version1
from mapstyle.dsl.version2 import compile_version2
from mapstyle.model.document import StyleDocument
from mapstyle.model.style import StyleModel

logger = logging.getLogger(__name__)


class Version(Enum):
    """Supported dialects, keyed by the exact ``version`` string."""

    ONE = "1"
    TWO = "2"


Compiler = Callable[[StyleDocument, CompileContext], StyleModel]

COMPILERS: dict[Version, Compiler] = {
    Version.ONE: compile_version1,
    Version.TWO: compile_version2,
}


def select_version(document: StyleDocument) -> Version | None:
    for version in Version:
        if version.value == document.version:
            return version
    return None


def compile_document(
    document: StyleDocument, context: CompileContext | None = None
) -> StyleModel | None:
    """Compile *document*, or return None if its version is not supported."""
    version = select_version(document)
    if version is None:
        logger.debug("No compiler for style version %r", document.version)
        return None
    return COMPILERS[version](document, context or CompileContext())


def looks_like_inline_json(text: str) -> bool:
    trimmed = text.strip()
    return trimmed.startswith("{") and trimmed.endswith("}")


def try_load_json(text: str, context: CompileContext | None = None) -> StyleModel | None:
    """Compile *text* if it is an inline JSON style.

    Returns None when the text is not shaped like a JSON object or declares an
    unsupported version, so the caller can try it as a URI instead.  Raises
    MalformedDocument when it looks like JSON but does not parse.
    """
    if not looks_like_inline_json(text):
        return None
    document = StyleDocument.from_text(text.strip())
    return compile_document(document, context)
