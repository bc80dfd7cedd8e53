"""Resolution data model.

A ``Fragment`` is one file's parsed structure: its literal lines plus the
include directives that were resolved to other files. Fragments are
position-independent; the same fragment is reused wherever its file is
included. ``FragmentStore`` memoizes them by canonical path.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from unfurl.core.errors import ErrorCode, ResolveError

SourcePath = Path
"""Canonical absolute path. Identity key for every per-file table."""


def canonicalize(path: str | os.PathLike[str], base: Path | None = None) -> SourcePath:
    """Absolute, symlink-free form of ``path`` (relative paths join ``base``)."""
    p = Path(path)
    if base is not None and not p.is_absolute():
        p = base / p
    return p.resolve()


@dataclass(frozen=True, slots=True)
class TextLine:
    """A literal line, 1-based ``origin_line`` in its own file."""

    content: str
    origin_line: int


@dataclass(frozen=True, slots=True)
class IncludeRef:
    """An include directive.

    ``resolved`` is False for cycle back-edges and unreadable targets;
    those never get expanded even if the target later lands in the store.
    """

    target: SourcePath
    origin_line: int
    directive: str
    resolved: bool = True


FragmentEntry = TextLine | IncludeRef


@dataclass(frozen=True, slots=True)
class Fragment:
    path: SourcePath
    entries: tuple[FragmentEntry, ...]

    def __post_init__(self) -> None:
        last = 0
        for entry in self.entries:
            if entry.origin_line <= last:
                raise ValueError(
                    f"{self.path}: origin lines must be strictly increasing "
                    f"({entry.origin_line} after {last})"
                )
            last = entry.origin_line

    @property
    def includes(self) -> list[IncludeRef]:
        return [e for e in self.entries if isinstance(e, IncludeRef)]


class FragmentStore:
    """Path -> Fragment, populated once per path (first writer wins)."""

    def __init__(self) -> None:
        self._fragments: dict[SourcePath, Fragment] = {}

    def add(self, fragment: Fragment) -> Fragment:
        """Store ``fragment`` unless its path is already memoized; return the stored one."""
        return self._fragments.setdefault(fragment.path, fragment)

    def get(self, path: SourcePath) -> Fragment | None:
        return self._fragments.get(path)

    def __getitem__(self, path: SourcePath) -> Fragment:
        return self._fragments[path]

    def __contains__(self, path: object) -> bool:
        return path in self._fragments

    def __len__(self) -> int:
        return len(self._fragments)

    def __iter__(self) -> Iterator[SourcePath]:
        return iter(self._fragments)


class DiagnosticKind(StrEnum):
    CYCLE = "cycle"
    UNREADABLE = "unreadable"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Recoverable problem found while resolving, naming the offending path."""

    kind: DiagnosticKind
    path: SourcePath
    included_from: SourcePath
    line: int
    message: str
    code: ErrorCode
    reason: str | None = None

    @classmethod
    def from_error(cls, kind: DiagnosticKind, error: ResolveError) -> Diagnostic:
        return cls(
            kind=kind,
            path=Path(error.details["path"]),
            included_from=Path(error.details["included_from"]),
            line=error.details["line"],
            message=error.message,
            code=error.code,
            reason=error.details.get("reason"),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind.value,
            "error": self.code.name,
            "path": str(self.path),
            "included_from": str(self.included_from),
            "line": self.line,
            "message": self.message,
            "reason": self.reason,
        }
