"""Shared STYLE-argument handling: inline JSON, a file path or a URL."""

from __future__ import annotations

from pathlib import Path

import click

from mapstyle.config import StyleConfig
from mapstyle.dsl.dispatcher import looks_like_inline_json
from mapstyle.errors import StyleError
from mapstyle.loader import DocumentLoader
from mapstyle.resources import ResourceResolver


def build_config(style: str, config_dir: str | None) -> StyleConfig:
    """Use --config-dir if given, else the style file's directory, else the cwd."""
    if config_dir:
        return StyleConfig(configuration_dir=config_dir)
    if not looks_like_inline_json(style) and Path(style).is_file():
        return StyleConfig(configuration_dir=str(Path(style).resolve().parent))
    return StyleConfig(configuration_dir=str(Path.cwd()))


def read_style_text(style: str, config: StyleConfig) -> str:
    """Return the JSON text named by *style*; raises ClickException if unavailable."""
    if looks_like_inline_json(style):
        return style
    path = Path(style)
    if path.is_file():
        return _decode(path.read_bytes(), style, config)
    resolver = ResourceResolver(config.configuration_dir) if config.configuration_dir else None
    try:
        content = DocumentLoader(config, resolver).load(style)
    except StyleError as exc:
        raise click.ClickException(str(exc)) from exc
    if content is None:
        raise click.ClickException(f"Cannot load style {style!r}")
    return _decode(content, style, config)


def _decode(content: bytes, style: str, config: StyleConfig) -> str:
    try:
        return content.decode(config.encoding)
    except UnicodeDecodeError as exc:
        raise click.ClickException(
            f"Style {style!r} is not {config.encoding} text: {exc.reason} at byte {exc.start}"
        ) from exc
