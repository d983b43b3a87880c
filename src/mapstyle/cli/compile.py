"""CLI command: mapstyle compile -- compile a style and print it as JSON."""

from __future__ import annotations

import json
import sys

import click

from mapstyle.cli.source import build_config, read_style_text
from mapstyle.errors import StyleError
from mapstyle.model.serialize import style_to_dict
from mapstyle.parser import StyleParser


@click.command(name="compile")
@click.argument("style")
@click.option("--config-dir", type=click.Path(file_okay=False), default=None,
              help="Directory that relative graphics and style files must stay inside.")
@click.option("--indent", type=int, default=2, show_default=True, help="JSON indentation.")
def compile_style(style: str, config_dir: str | None, indent: int) -> None:
    """Compile STYLE (inline JSON, file path or URL) and print the rules as JSON.

    Exits with code 1 if the style is malformed or declares an unsupported version.
    """
    config = build_config(style, config_dir)
    text = read_style_text(style, config)

    try:
        compiled = StyleParser(config).parse_inline(text)
    except StyleError as exc:
        click.echo(f"Style error: {exc}", err=True)
        sys.exit(1)

    if compiled is None:
        click.echo("Not a supported JSON style (version must be \"1\" or \"2\")", err=True)
        sys.exit(1)

    click.echo(json.dumps(style_to_dict(compiled), indent=indent or None))
