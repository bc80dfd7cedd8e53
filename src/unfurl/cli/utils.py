"""CLI utilities shared by the unfurl commands."""

from pathlib import Path

import click
from rich.markup import escape

from unfurl.config.loader import load_config
from unfurl.config.models import UnfurlConfig
from unfurl.core.errors import UnfurlError
from unfurl.core.formatting import display_path
from unfurl.core.logging import set_session_id
from unfurl.core.progress import spinner, status
from unfurl.resolve.model import Diagnostic, DiagnosticKind
from unfurl.session import UnfurlSession, unfurl


def load_cli_config(root: Path) -> UnfurlConfig:
    """Config for ``root``, with config errors turned into click errors."""
    try:
        return load_config(root.resolve())
    except UnfurlError as e:
        raise click.ClickException(str(e)) from e


def open_session(root: Path, config: UnfurlConfig) -> UnfurlSession:
    """Unfurl ``root`` and report its diagnostics.

    Raises:
        click.ClickException: the root is empty or unreadable.
    """
    try:
        with spinner(f"Resolving includes in {escape(root.name)}"):
            session = unfurl(root, config=config)
    except UnfurlError as e:
        raise click.ClickException(str(e)) from e

    set_session_id(session.session_id)
    report_diagnostics(session)
    return session


def report_diagnostics(session: UnfurlSession) -> None:
    base = session.root.parent
    for diag in session.diagnostics:
        status(_describe(diag, base), style="warning")


def _describe(diag: Diagnostic, base: Path) -> str:
    where = escape(f"{display_path(diag.included_from, base)}:{diag.line}")
    target = escape(display_path(diag.path, base))
    if diag.kind is DiagnosticKind.CYCLE:
        return f"Circular include of {target} at {where}"
    return f"Failed to include {target} at {where}: {escape(diag.reason or '')}"
