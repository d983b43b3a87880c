"""Resolution of relative resource references against the configuration directory."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote, urlparse

from mapstyle.errors import ResourceAccessError


def url_scheme(reference: str) -> str:
    """Return the lower-cased URL scheme of *reference*, or "" for plain paths.

    Single letter schemes are treated as Windows drive letters, not URLs.
    """
    scheme = urlparse(reference.strip()).scheme.lower()
    return scheme if len(scheme) > 1 else ""


class ResourceResolver:
    """Resolves non-URL references to paths confined to *root*.

    Relative references are joined to *base_dir* (defaults to *root*); the
    result must lie inside *root* or ResourceAccessError is raised.  URLs with
    a scheme other than ``file`` are returned unchanged.
    """

    def __init__(self, root: str | Path, base_dir: str | Path | None = None) -> None:
        self.root = Path(root).resolve()
        self.base_dir = Path(base_dir).resolve() if base_dir is not None else self.root

    def resolve_path(self, reference: str) -> Path:
        ref = reference.strip()
        if url_scheme(ref) == "file":
            ref = unquote(urlparse(ref).path)
        candidate = (self.base_dir / ref).resolve()
        if candidate != self.root and self.root not in candidate.parents:
            raise ResourceAccessError(
                f"Resource {reference!r} is outside the configuration directory {str(self.root)!r}"
            )
        return candidate

    def resolve(self, reference: str) -> str:
        scheme = url_scheme(reference)
        if scheme and scheme != "file":
            return reference.strip()
        return str(self.resolve_path(reference))
