"""unfurl apply command - write changes made to an exported view back to the sources."""

from pathlib import Path

import click
from rich.markup import escape

from unfurl.cli.utils import load_cli_config, open_session
from unfurl.core.formatting import display_path, format_path_list, pluralize
from unfurl.core.progress import status
from unfurl.edit.persist import SaveOutcome
from unfurl.files.store import split_lines
from unfurl.session import UnfurlSession


def changed_lines(session: UnfurlSession, edited: list[str]) -> list[tuple[int, str]]:
    """``(flat_index, text)`` for every line of ``edited`` that differs from the view.

    Raises:
        click.ClickException: ``edited`` has a different number of lines.
    """
    current = session.flat_lines
    if len(edited) != len(current):
        raise click.ClickException(
            f"Edited view has {pluralize(len(edited), 'line')}, the unfurled view has "
            f"{len(current)}. Only in-place line changes can be applied; "
            "adding or removing lines is not supported."
        )
    return [(i, new) for i, (old, new) in enumerate(zip(current, edited, strict=True)) if old != new]


def report_outcomes(session: UnfurlSession, outcomes: list[SaveOutcome]) -> int:
    """Print one line per file and return the number of failures."""
    base = session.root.parent
    failed = 0
    for outcome in outcomes:
        shown = escape(display_path(outcome.path, base))
        if outcome.ok:
            status(f"Saved changes to {shown}", style="success")
        else:
            failed += 1
            status(escape(outcome.error or f"Failed to write {outcome.path}"), style="error")
    return failed


@click.command()
@click.argument("root", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("edited", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--dry-run", is_flag=True, help="Show which files would change without writing them")
@click.pass_context
def apply_command(ctx: click.Context, root: Path, edited: Path, dry_run: bool) -> None:
    """Apply the line changes in EDITED (an exported view of ROOT) to the original files.

    Changes to the read-only start/end/failed-include marker lines are
    reported and ignored.
    """
    config = load_cli_config(root)
    session = open_session(root, config)

    try:
        edited_lines = split_lines(session.files.read_text(edited.resolve()))
    except OSError as e:
        raise click.ClickException(f"Failed to read {edited}: {e.strerror or e}") from e

    edits = changed_lines(session, edited_lines)
    if not edits:
        status("No changes to apply")
        return

    rejected = 0
    for outcome in session.apply_edits(edits):
        if not outcome.accepted:
            rejected += 1
            status(
                f"Line {outcome.index} is a read-only marker; change ignored",
                style="warning",
            )

    base = session.root.parent
    targets = [display_path(p, base) for p in session.dirty_paths()]
    if not targets:
        status("No editable lines changed")
        return

    if dry_run:
        status(
            f"Would update {pluralize(len(targets), 'file')}: {escape(format_path_list(targets))} "
            f"({pluralize(len(session.patches), 'line')})"
        )
        return

    failed = report_outcomes(session, session.save())
    if failed:
        status(f"{pluralize(failed, 'file')} could not be saved", style="error")
        ctx.exit(1)
    status("All changes saved.", style="success")
    if rejected:
        status(f"{pluralize(rejected, 'marker edit')} ignored", style="warning")
