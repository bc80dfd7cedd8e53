"""unfurl CLI - unfurl command."""

import click

from unfurl import __version__
from unfurl.cli.apply import apply_command
from unfurl.cli.export import export_command
from unfurl.cli.show import show_command
from unfurl.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="unfurl")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logs on stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Unfurl local #include "..." directives into one view and write edits back."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO", console=verbose)


cli.add_command(show_command, name="show")
cli.add_command(export_command, name="export")
cli.add_command(apply_command, name="apply")


if __name__ == "__main__":
    cli()
