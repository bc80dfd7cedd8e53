"""unfurl show command - print the unfurled view."""

import json
from pathlib import Path

import click

from unfurl.cli.utils import load_cli_config, open_session
from unfurl.flatten.view import Boundary, Code, MappingEntry


def mapping_to_dict(entry: MappingEntry) -> dict[str, object]:
    if isinstance(entry, Code):
        return {"kind": "code", "path": str(entry.path), "line": entry.line}
    if isinstance(entry, Boundary):
        return {"kind": "boundary", "path": str(entry.path), "edge": entry.edge}
    return {"kind": "unresolved", "path": str(entry.path)}


@click.command()
@click.argument("root", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output lines, mapping and diagnostics as JSON")
@click.option("-n", "--numbers", is_flag=True, help="Prefix each line with its 0-based flat index")
def show_command(root: Path, as_json: bool, numbers: bool) -> None:
    """Print ROOT with its local includes unfurled."""
    config = load_cli_config(root)
    session = open_session(root, config)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "root": str(session.root),
                    "lines": session.flat_lines,
                    "mapping": [mapping_to_dict(m) for m in session.mapping],
                    "diagnostics": [d.to_dict() for d in session.diagnostics],
                },
                indent=2,
            )
        )
        return

    width = len(str(max(len(session.flat_lines) - 1, 0)))
    for index, (text, entry) in enumerate(zip(session.flat_lines, session.mapping, strict=True)):
        if numbers:
            flag = " " if entry.editable else "*"
            click.echo(f"{index:>{width}}{flag} {text}")
        else:
            click.echo(text)
