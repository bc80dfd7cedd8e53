"""Include Resolver - recursive discovery of quoted includes.

Resolution is depth-first. The set of files on the active recursion path
is threaded through the recursion for cycle detection; it is separate
from the ``FragmentStore`` so that a file included from two independent
branches is memoized, not flagged as a cycle.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from unfurl.config.models import ResolveConfig
from unfurl.core.cancel import CancelToken
from unfurl.core.errors import ResolveError, SessionError
from unfurl.core.logging import get_logger
from unfurl.files.store import FileStore, split_lines
from unfurl.resolve.model import (
    Diagnostic,
    DiagnosticKind,
    Fragment,
    FragmentEntry,
    FragmentStore,
    IncludeRef,
    SourcePath,
    TextLine,
    canonicalize,
)

log = get_logger("resolve")


@dataclass
class Resolution:
    """Output of one resolve pass."""

    root: SourcePath
    store: FragmentStore
    diagnostics: list[Diagnostic] = field(default_factory=list)


class IncludeResolver:
    """Builds a ``FragmentStore`` for a root file.

    One resolver instance serves one resolve pass at a time; the
    ``Resolution`` it returns is owned by the caller.
    """

    def __init__(
        self,
        files: FileStore,
        config: ResolveConfig | None = None,
        *,
        cancel: CancelToken | None = None,
    ) -> None:
        self._files = files
        self._config = config or ResolveConfig()
        self._pattern = re.compile(self._config.include_pattern)
        self._cancel = cancel or CancelToken()

    def resolve(self, root: SourcePath) -> Resolution:
        """Resolve ``root`` and everything it includes.

        Raises:
            SessionError(ROOT_UNREADABLE): the root itself cannot be read.
            SessionError(SESSION_CANCELLED): the cancel token fired.
        """
        resolution = Resolution(root=root, store=FragmentStore())
        try:
            fragment = self._parse(root, resolution, active={root}, depth=0)
        except OSError as e:
            raise SessionError.root_unreadable(str(root), _reason(e)) from e
        resolution.store.add(fragment)

        log.info(
            "unfurl_resolved",
            root=str(root),
            files=len(resolution.store),
            diagnostics=len(resolution.diagnostics),
        )
        return resolution

    def _parse(
        self,
        path: SourcePath,
        resolution: Resolution,
        *,
        active: set[SourcePath],
        depth: int,
    ) -> Fragment:
        if self._cancel.cancelled:
            raise SessionError.cancelled(str(resolution.root))

        text = self._files.read_text(path)
        log.debug("file_read", path=str(path), depth=depth)

        entries: list[FragmentEntry] = []
        for number, line in enumerate(split_lines(text), start=1):
            match = self._pattern.search(line)
            if match is None:
                entries.append(TextLine(content=line, origin_line=number))
                continue
            target = canonicalize(match.group(1), path.parent)
            entries.append(
                self._include(target, path, number, line, resolution, active=active, depth=depth)
            )

        return Fragment(path=path, entries=tuple(entries))

    def _include(
        self,
        target: SourcePath,
        parent: SourcePath,
        line_no: int,
        directive: str,
        resolution: Resolution,
        *,
        active: set[SourcePath],
        depth: int,
    ) -> IncludeRef:
        if target in resolution.store:
            return IncludeRef(target, line_no, directive)

        if target in active:
            err = ResolveError.cycle(str(target), str(parent), line_no)
            log.warning("include_cycle", path=str(target), included_from=str(parent), line=line_no)
            resolution.diagnostics.append(Diagnostic.from_error(DiagnosticKind.CYCLE, err))
            return IncludeRef(target, line_no, directive, resolved=False)

        if depth + 1 > self._config.max_depth:
            reason = f"include depth exceeds {self._config.max_depth}"
            self._unreadable(target, parent, line_no, reason, resolution)
            return IncludeRef(target, line_no, directive, resolved=False)

        active.add(target)
        try:
            fragment = self._parse(target, resolution, active=active, depth=depth + 1)
        except OSError as e:
            self._unreadable(target, parent, line_no, _reason(e), resolution)
            return IncludeRef(target, line_no, directive, resolved=False)
        finally:
            active.discard(target)

        resolution.store.add(fragment)
        return IncludeRef(target, line_no, directive)

    def _unreadable(
        self,
        target: SourcePath,
        parent: SourcePath,
        line_no: int,
        reason: str,
        resolution: Resolution,
    ) -> None:
        err = ResolveError.unreadable(str(target), str(parent), line_no, reason)
        log.warning(
            "include_unreadable",
            path=str(target),
            included_from=str(parent),
            line=line_no,
            reason=reason,
        )
        resolution.diagnostics.append(Diagnostic.from_error(DiagnosticKind.UNREADABLE, err))


def _reason(error: OSError) -> str:
    return error.strerror or str(error)
