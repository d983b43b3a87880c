"""Loading style documents by URI: http(s) through httpx, files through the resolver."""

from __future__ import annotations

import logging

import httpx

from mapstyle.config import StyleConfig
from mapstyle.dsl.dispatcher import looks_like_inline_json
from mapstyle.errors import StyleLoadError
from mapstyle.resources import ResourceResolver, url_scheme

logger = logging.getLogger(__name__)


class DocumentLoader:
    """Fetches the bytes of a style referenced by URL or by configuration-relative path.

    :meth:`load` returns None when the reference is not something this loader
    can fetch (not a URL, no configuration directory, or no such file), and
    raises StyleLoadError when a fetch is attempted and fails.
    """

    def __init__(
        self,
        config: StyleConfig | None = None,
        resolver: ResourceResolver | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.config = config or StyleConfig()
        self.resolver = resolver
        self._client = client

    def load(self, reference: str) -> bytes | None:
        ref = reference.strip()
        if not ref or looks_like_inline_json(ref):
            return None
        scheme = url_scheme(ref)
        if scheme and scheme not in self.config.allowed_schemes:
            logger.debug("Scheme %r is not allowed for style %r", scheme, ref)
            return None
        if scheme in ("http", "https"):
            return self._fetch(ref)
        return self._read(ref)

    def _fetch(self, url: str) -> bytes:
        logger.info("Loading style from %s", url)
        try:
            if self._client is not None:
                resp = self._client.get(url)
            else:
                with httpx.Client(
                    timeout=self.config.http_timeout, follow_redirects=True
                ) as client:
                    resp = client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StyleLoadError(
                f"Loading style from {url} failed with HTTP {exc.response.status_code}",
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise StyleLoadError(f"Loading style from {url} failed: {exc}", cause=exc) from exc
        return resp.content

    def _read(self, reference: str) -> bytes | None:
        if self.resolver is None:
            logger.debug("No configuration directory; not loading %r as a file", reference)
            return None
        path = self.resolver.resolve_path(reference)
        try:
            if not path.is_file():
                logger.debug("Style file %s does not exist", path)
                return None
            logger.info("Loading style from %s", path)
            return path.read_bytes()
        except OSError as exc:
            raise StyleLoadError(f"Cannot read style file {path}: {exc}", cause=exc) from exc
