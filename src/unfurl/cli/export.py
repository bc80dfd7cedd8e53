"""unfurl export command - write the unfurled view to a file for an editor."""

from pathlib import Path

import click
from rich.markup import escape

from unfurl.cli.utils import load_cli_config, open_session
from unfurl.core.formatting import pluralize
from unfurl.core.progress import status


def default_export_path(root: Path, prefix: str) -> Path:
    """``<root dir>/<prefix><root name>``, beside the root so relative tooling still works."""
    return root.parent / f"{prefix}{root.name}"


@click.command()
@click.argument("root", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Destination file (default: _unfurled_<name> beside ROOT)",
)
def export_command(root: Path, output: Path | None) -> None:
    """Write ROOT's unfurled view to a file.

    Edit the exported file, then run 'unfurl apply ROOT FILE' to write the
    changes back into the original sources.
    """
    config = load_cli_config(root)
    session = open_session(root, config)

    destination = output or default_export_path(session.root, config.export.prefix)
    try:
        session.files.write_text(destination, session.render())
    except OSError as e:
        raise click.ClickException(f"Failed to write {destination}: {e.strerror or e}") from e

    status(
        f"Unfurled {pluralize(len(session.fragments), 'file')} into {escape(str(destination))}",
        style="success",
    )
    click.echo(str(destination))
