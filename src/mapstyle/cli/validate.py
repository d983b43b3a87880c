"""CLI command: mapstyle validate -- lint a style document."""

from __future__ import annotations

import sys

import click

from mapstyle.cli.source import build_config, read_style_text
from mapstyle.errors import MalformedDocument
from mapstyle.model.diagnostic import Severity
from mapstyle.model.document import StyleDocument
from mapstyle.validation import validate as run_validate


@click.command()
@click.argument("style")
@click.option("--config-dir", type=click.Path(file_okay=False), default=None,
              help="Directory that relative style files must stay inside.")
def validate(style: str, config_dir: str | None) -> None:
    """Validate a style document.

    Prints diagnostics (errors, warnings, info) and exits with code 0 if
    no errors are found, or code 1 if there are errors.
    """
    config = build_config(style, config_dir)
    text = read_style_text(style, config)

    # Parse
    try:
        document = StyleDocument.from_text(text)
    except MalformedDocument as exc:
        click.echo(f"Parse error: {exc}", err=True)
        sys.exit(1)

    # Validate
    diagnostics = run_validate(document)

    if not diagnostics:
        click.echo("OK: style is valid (0 diagnostics)")
        sys.exit(0)

    # Print diagnostics grouped by severity
    errors = [d for d in diagnostics if d.severity is Severity.ERROR]
    warnings = [d for d in diagnostics if d.severity is Severity.WARNING]
    infos = [d for d in diagnostics if d.severity is Severity.INFO]

    for diag in diagnostics:
        click.echo(str(diag))

    click.echo()
    click.echo(
        f"Summary: {len(errors)} error(s), {len(warnings)} warning(s), {len(infos)} info"
    )

    if errors:
        sys.exit(1)
    sys.exit(0)
