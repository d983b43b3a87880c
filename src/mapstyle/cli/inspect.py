"""CLI command: mapstyle inspect -- display the compiled rules."""

from __future__ import annotations

import sys

import click

from mapstyle.cli.source import build_config, read_style_text
from mapstyle.errors import StyleError
from mapstyle.model.style import (
    ExpressionLabel,
    LineSymbolizer,
    PointSymbolizer,
    PolygonSymbolizer,
    Symbolizer,
    TextSymbolizer,
)
from mapstyle.parser import StyleParser


def _describe(symbolizer: Symbolizer) -> str:
    if isinstance(symbolizer, PointSymbolizer):
        g = symbolizer.graphic
        shape = g.external or g.mark
        return f"point  graphic={shape} size={g.size:g} fill={g.fill.color}"
    if isinstance(symbolizer, LineSymbolizer):
        s = symbolizer.stroke
        dash = f" dash={list(s.dash_array)}" if s.dash_array else ""
        return f"line  stroke={s.color} width={s.width:g}{dash}"
    if isinstance(symbolizer, PolygonSymbolizer):
        return f"polygon  fill={symbolizer.fill.color} stroke={symbolizer.stroke.color}"
    assert isinstance(symbolizer, TextSymbolizer)
    label = symbolizer.label
    if isinstance(label, ExpressionLabel):
        text = f"[{label.source}]"
    else:
        text = f'"{label.text}"'
    return f"text  label={text} font={symbolizer.font.family} {symbolizer.font.size:g}"


@click.command()
@click.argument("style")
@click.option("--config-dir", type=click.Path(file_okay=False), default=None,
              help="Directory that relative graphics and style files must stay inside.")
def inspect(style: str, config_dir: str | None) -> None:
    """Compile a style and display its rules and symbolizers."""
    config = build_config(style, config_dir)
    text = read_style_text(style, config)

    try:
        compiled = StyleParser(config).parse_inline(text)
    except StyleError as exc:
        click.echo(f"Style error: {exc}", err=True)
        sys.exit(1)
    if compiled is None:
        click.echo("Not a supported JSON style", err=True)
        sys.exit(1)

    click.echo(f"Version: {compiled.version}")
    click.echo(f"Rules:   {len(compiled.rules)}")
    click.echo()

    for rule in compiled.rules:
        parts = [f"  {rule.filter}"]
        if rule.min_scale is not None:
            parts.append(f"minScale={rule.min_scale:g}")
        if rule.max_scale is not None:
            parts.append(f"maxScale={rule.max_scale:g}")
        click.echo("  ".join(parts))
        for symbolizer in rule.symbolizers:
            click.echo(f"      {_describe(symbolizer)}")
