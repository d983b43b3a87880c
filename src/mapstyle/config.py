from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StyleConfig:
    configuration_dir: str | None = None  # root for relative resources; None disables file access
    http_timeout: float = 30.0
    encoding: str = "utf-8"
    allowed_schemes: tuple[str, ...] = ("http", "https", "file")
