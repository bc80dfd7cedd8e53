"""Unfurl sessions - the boundary the presentation layer talks to.

A session owns everything produced for one root file: the fragment
store, the flat view with its mapping, the diagnostics and the pending
PatchSet. Nothing is shared between sessions, so any number of them can
coexist. ``SessionManager`` adds the "one active view" policy on top:
opening a new root cancels the previous session's in-flight resolution.

Usage::

    session = unfurl("src/main.c")
    outcome = apply_edit(session, 3, "int y = 2;")
    if not outcome.accepted:
        ...  # revert the visible change
    for result in save(session):
        print(result.path, result.ok, result.error)
"""

from __future__ import annotations

import os
import threading
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from unfurl.config.models import UnfurlConfig
from unfurl.core.cancel import CancelToken
from unfurl.core.errors import SessionError
from unfurl.core.logging import get_logger
from unfurl.edit.persist import SaveOutcome, save_patches
from unfurl.edit.reconcile import EditOutcome, PatchSet, reconcile_edit
from unfurl.files.store import FileStore, LocalFileStore
from unfurl.flatten.view import FlatView, MappingEntry, flatten
from unfurl.resolve.model import Diagnostic, FragmentStore, SourcePath, canonicalize
from unfurl.resolve.resolver import IncludeResolver

log = get_logger("session")


@dataclass
class UnfurlSession:
    """State of one unfurled root."""

    session_id: str
    root: SourcePath
    fragments: FragmentStore
    view: FlatView
    files: FileStore
    config: UnfurlConfig
    diagnostics: list[Diagnostic] = field(default_factory=list)
    patches: PatchSet = field(default_factory=PatchSet)
    cancel: CancelToken = field(default_factory=CancelToken)

    @property
    def flat_lines(self) -> list[str]:
        return self.view.lines

    @property
    def mapping(self) -> list[MappingEntry]:
        return self.view.mapping

    def apply_edit(self, index: int, text: str) -> EditOutcome:
        """Replace flat line ``index``. Rejected (and not stored) on marker lines."""
        outcome = reconcile_edit(index, text, self.view.mapping, self.patches)
        if outcome.accepted:
            self.view.lines[index] = text
        return outcome

    def apply_edits(self, edits: Iterable[tuple[int, str]]) -> list[EditOutcome]:
        return [self.apply_edit(index, text) for index, text in edits]

    def dirty_paths(self) -> list[SourcePath]:
        return self.patches.paths()

    def save(self) -> list[SaveOutcome]:
        """Write pending patches. The PatchSet is kept, so saving again is harmless."""
        outcomes = save_patches(self.patches, self.files, self.config.save)
        log.info(
            "session_saved",
            session_id=self.session_id,
            files=len(outcomes),
            failed=sum(1 for o in outcomes if not o.ok),
        )
        return outcomes

    def render(self) -> str:
        return self.view.text()


def unfurl(
    root: str | os.PathLike[str],
    *,
    config: UnfurlConfig | None = None,
    files: FileStore | None = None,
    cancel: CancelToken | None = None,
    session_id: str | None = None,
) -> UnfurlSession:
    """Resolve and flatten ``root`` into a new session.

    Raises:
        SessionError(EMPTY_ROOT_PATH): ``root`` is empty.
        SessionError(ROOT_UNREADABLE): the root file cannot be read.
        SessionError(SESSION_CANCELLED): ``cancel`` fired before resolution finished.
    """
    if not str(root).strip():
        raise SessionError.empty_root_path()

    config = config or UnfurlConfig()
    files = files or LocalFileStore(config.resolve.encoding)
    cancel = cancel or CancelToken()
    sid = session_id or f"unf_{uuid.uuid4().hex[:12]}"
    root_path = canonicalize(Path(root).expanduser())

    resolver = IncludeResolver(files, config.resolve, cancel=cancel)
    resolution = resolver.resolve(root_path)
    view = flatten(root_path, resolution.store, config.markers)

    log.info(
        "session_opened",
        session_id=sid,
        root=str(root_path),
        lines=len(view),
        files=len(resolution.store),
    )
    return UnfurlSession(
        session_id=sid,
        root=root_path,
        fragments=resolution.store,
        view=view,
        files=files,
        config=config,
        diagnostics=resolution.diagnostics,
        cancel=cancel,
    )


def apply_edit(session: UnfurlSession, index: int, text: str) -> EditOutcome:
    return session.apply_edit(index, text)


def save(session: UnfurlSession) -> list[SaveOutcome]:
    return session.save()


class SessionManager:
    """Keeps one active session; opening a root supersedes the previous one."""

    def __init__(self, config: UnfurlConfig | None = None, files: FileStore | None = None) -> None:
        self._config = config or UnfurlConfig()
        self._files = files
        self._lock = threading.Lock()
        self._active: UnfurlSession | None = None
        self._pending: CancelToken | None = None

    @property
    def active(self) -> UnfurlSession | None:
        return self._active

    def open(self, root: str | os.PathLike[str]) -> UnfurlSession:
        """Unfurl ``root`` and make it the active session.

        A resolution still running for an older ``open`` call is cancelled;
        its result is discarded rather than replacing the newer session.
        """
        token = CancelToken()
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            if self._active is not None:
                self._active.cancel.cancel()
            self._pending = token
            self._active = None

        session = unfurl(root, config=self._config, files=self._files, cancel=token)

        with self._lock:
            if token.cancelled:
                raise SessionError.cancelled(str(session.root))
            self._pending = None
            self._active = session
        return session

    def close(self) -> None:
        with self._lock:
            if self._active is not None:
                self._active.cancel.cancel()
            self._active = None
