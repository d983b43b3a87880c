"""Style parser entry point: inline JSON first, then the text as a URI."""

from __future__ import annotations

import logging

from mapstyle.config import StyleConfig
from mapstyle.dsl.dispatcher import try_load_json
from mapstyle.dsl.properties import CompileContext
from mapstyle.dsl.protocols import FilterParser
from mapstyle.ecql.parser import EcqlParser
from mapstyle.errors import MalformedDocument, StyleLoadError
from mapstyle.loader import DocumentLoader
from mapstyle.model.style import StyleModel
from mapstyle.resources import ResourceResolver

logger = logging.getLogger(__name__)


class StyleParser:
    """Compiles JSON style text, or a reference to it, into a StyleModel.

    Instances hold only configuration and stateless collaborators, so one
    parser can serve concurrent callers; every document gets fresh value and
    default tables.
    """

    def __init__(
        self,
        config: StyleConfig | None = None,
        filter_parser: FilterParser | None = None,
        loader: DocumentLoader | None = None,
    ) -> None:
        self.config = config or StyleConfig()
        resolver = (
            ResourceResolver(self.config.configuration_dir)
            if self.config.configuration_dir
            else None
        )
        self.context = CompileContext(
            filter_parser=filter_parser or EcqlParser(),
            graphic_resolver=resolver,
        )
        self.loader = loader or DocumentLoader(self.config, resolver)

    def parse_inline(self, text: str) -> StyleModel | None:
        """Compile *text* as inline JSON; None if it is not a supported JSON style."""
        return try_load_json(text, self.context)

    def parse_style(self, style: str) -> StyleModel | None:
        """Compile *style* as inline JSON, falling back to loading it as a URI.

        Returns None when neither step yields a supported style.
        """
        compiled = self.parse_inline(style)
        if compiled is not None:
            return compiled

        content = self.loader.load(style)
        if content is None:
            return None
        try:
            text = content.decode(self.config.encoding)
        except UnicodeDecodeError as e:
            raise StyleLoadError(
                f"Style loaded from {style!r} is not {self.config.encoding} text", cause=e
            ) from e
        try:
            return try_load_json(text, self.context)
        except MalformedDocument as e:
            raise StyleLoadError(f"Style loaded from {style!r} is malformed: {e}", cause=e) from e


def parse_style(style: str, config: StyleConfig | None = None) -> StyleModel | None:
    """Convenience wrapper around :meth:`StyleParser.parse_style`."""
    return StyleParser(config).parse_style(style)
