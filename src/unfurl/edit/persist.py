"""Persistence - write a PatchSet back into the original files.

Each touched file is re-read, patched line by line and written back.
Failures are collected per file; one unwritable file never stops the
others. The PatchSet is not consumed, so saving twice against an
unchanged file writes the same bytes twice.

Files are read without locking. Changes made to a file by another
program after it was unfurled are overwritten on the patched lines.
"""

from __future__ import annotations

from dataclasses import dataclass

from unfurl.config.models import SaveConfig
from unfurl.core.errors import SaveError
from unfurl.core.logging import get_logger
from unfurl.edit.reconcile import PatchSet
from unfurl.files.store import FileStore, has_trailing_newline, join_lines, split_lines
from unfurl.resolve.model import SourcePath

log = get_logger("save")


@dataclass(frozen=True, slots=True)
class SaveOutcome:
    """Per-file save result."""

    path: SourcePath
    ok: bool
    error: str | None = None
    lines_written: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "path": str(self.path),
            "ok": self.ok,
            "error": self.error,
            "lines_written": self.lines_written,
        }


def apply_patch(
    text: str,
    patch: dict[int, str],
    config: SaveConfig,
    path: SourcePath,
) -> str:
    """Return ``text`` with the 1-based line replacements in ``patch`` applied.

    Raises:
        SaveError(LINE_OUT_OF_RANGE): a line is past the end and overflow is "error".
    """
    lines = split_lines(text)
    for line_no in sorted(patch):
        if line_no > len(lines):
            if config.overflow == "error":
                raise SaveError.line_out_of_range(str(path), line_no, len(lines))
            lines.extend([""] * (line_no - len(lines)))
        lines[line_no - 1] = patch[line_no]

    trailing = config.preserve_trailing_newline and has_trailing_newline(text)
    return join_lines(lines, trailing_newline=trailing)


def save_patches(
    patches: PatchSet,
    files: FileStore,
    config: SaveConfig | None = None,
) -> list[SaveOutcome]:
    """Apply every file's patch and write it back. One outcome per file in ``patches``."""
    config = config or SaveConfig()
    outcomes: list[SaveOutcome] = []

    for path, patch in patches.items():
        try:
            original = files.read_text(path)
        except OSError as e:
            outcomes.append(_failed(path, SaveError.read_failed(str(path), e.strerror or str(e))))
            continue

        try:
            updated = apply_patch(original, patch, config, path)
        except SaveError as err:
            outcomes.append(_failed(path, err))
            continue

        try:
            files.write_text(path, updated)
        except OSError as e:
            outcomes.append(_failed(path, SaveError.write_failed(str(path), e.strerror or str(e))))
            continue

        log.info("file_saved", path=str(path), lines=len(patch))
        outcomes.append(SaveOutcome(path=path, ok=True, lines_written=len(patch)))

    return outcomes


def _failed(path: SourcePath, err: SaveError) -> SaveOutcome:
    log.error("file_save_failed", path=str(path), error=err.error_name, reason=err.message)
    return SaveOutcome(path=path, ok=False, error=err.message)
