"""Edit Reconciler - map edits on the unfurled view back to original files.

Edits are whole-line replacements keyed by flat index. Each accepted edit
upserts ``PatchSet[path][line]``; the last write for a key wins, whether
edits arrive one keystroke at a time or as a batch.

A replacement is exactly one line and never contains "\\n". A trailing
"\\r" from CRLF files is part of the line and is written back as given.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from unfurl.core.errors import EditError, SessionError
from unfurl.core.logging import get_logger
from unfurl.flatten.view import Code, MappingEntry
from unfurl.resolve.model import SourcePath

log = get_logger("edit")


class PatchSet:
    """Pending line replacements per original file, not yet on disk."""

    def __init__(self) -> None:
        self._patches: dict[SourcePath, dict[int, str]] = {}

    def set(self, path: SourcePath, line: int, text: str) -> None:
        self._patches.setdefault(path, {})[line] = text

    def for_path(self, path: SourcePath) -> dict[int, str]:
        return dict(self._patches.get(path, {}))

    def paths(self) -> list[SourcePath]:
        return list(self._patches)

    def items(self) -> Iterator[tuple[SourcePath, dict[int, str]]]:
        for path, lines in self._patches.items():
            yield path, dict(lines)

    def clear(self) -> None:
        self._patches.clear()

    def __contains__(self, path: object) -> bool:
        return path in self._patches

    def __len__(self) -> int:
        """Number of pending (path, line) replacements."""
        return sum(len(lines) for lines in self._patches.values())

    def __bool__(self) -> bool:
        return bool(self._patches)


@dataclass(frozen=True, slots=True)
class EditOutcome:
    """Result of one edit. Marker lines and texts containing "\\n" are not accepted."""

    index: int
    accepted: bool
    path: SourcePath | None = None
    line: int | None = None
    error: EditError | None = None


def reconcile_edit(
    index: int,
    text: str,
    mapping: Sequence[MappingEntry],
    patches: PatchSet,
) -> EditOutcome:
    """Record a single edit against ``patches``.

    Raises:
        SessionError(FLAT_INDEX_OUT_OF_RANGE): ``index`` is not a line of the view.
    """
    if not 0 <= index < len(mapping):
        raise SessionError.index_out_of_range(index, len(mapping))

    entry = mapping[index]
    if not isinstance(entry, Code):
        error = EditError.boundary(index, str(entry.path))
        log.info("boundary_edit_rejected", index=index, path=str(entry.path))
        return EditOutcome(index=index, accepted=False, path=entry.path, error=error)

    if "\n" in text:
        error = EditError.multiline(index, str(entry.path))
        log.info("multiline_edit_rejected", index=index, path=str(entry.path))
        return EditOutcome(index=index, accepted=False, path=entry.path, line=entry.line, error=error)

    patches.set(entry.path, entry.line, text)
    log.debug("edit_recorded", index=index, path=str(entry.path), line=entry.line)
    return EditOutcome(index=index, accepted=True, path=entry.path, line=entry.line)


def reconcile(
    edits: Iterable[tuple[int, str]],
    mapping: Sequence[MappingEntry],
    patches: PatchSet | None = None,
) -> PatchSet:
    """Fold ``(flat_index, new_text)`` edits into a PatchSet, skipping marker lines."""
    patches = patches if patches is not None else PatchSet()
    for index, text in edits:
        reconcile_edit(index, text, mapping, patches)
    return patches
