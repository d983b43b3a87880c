"""mapstyle CLI entry point: Click group with subcommands."""

import logging

import click

from mapstyle import __version__


@click.group()
@click.version_option(version=__version__, prog_name="mapstyle")
@click.option("-v", "--verbose", is_flag=True, help="Log compiler decisions to stderr.")
def cli(verbose: bool) -> None:
    """mapstyle - compile JSON map styles into rules and symbolizers."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Import and register subcommands
from mapstyle.cli.compile import compile_style  # noqa: E402
from mapstyle.cli.validate import validate  # noqa: E402
from mapstyle.cli.inspect import inspect  # noqa: E402

cli.add_command(compile_style)
cli.add_command(validate)
cli.add_command(inspect)
