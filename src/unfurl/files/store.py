"""File Store - the only place unfurl touches the filesystem.

Every core component reads and writes through a ``FileStore``. Swapping
the store (in-memory for tests, an editor's buffer cache, a remote
workspace) changes how I/O happens without touching resolution,
flattening or persistence.
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class FileStore(Protocol):
    """Raw-text access to source files. Failures raise ``OSError``."""

    def read_text(self, path: Path) -> str: ...

    def write_text(self, path: Path, text: str) -> None: ...


class LocalFileStore:
    """FileStore backed by the local filesystem.

    Newlines are passed through untouched so that saving an unmodified
    file reproduces it byte for byte.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding
        self._reads: Counter[Path] = Counter()

    @property
    def encoding(self) -> str:
        return self._encoding

    def read_text(self, path: Path) -> str:
        self._reads[path] += 1
        try:
            with path.open(encoding=self._encoding, newline="") as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise OSError(f"not valid {self._encoding}: {e.reason}") from e

    def write_text(self, path: Path, text: str) -> None:
        with path.open("w", encoding=self._encoding, newline="") as f:
            f.write(text)

    def read_count(self, path: Path) -> int:
        """How many times ``path`` was read through this store."""
        return self._reads[path]


def split_lines(text: str) -> list[str]:
    """Split raw text into lines without a phantom last line.

    "a\\nb\\n" -> ["a", "b"]; "a\\nb" -> ["a", "b"]; "" -> [].
    Only "\\n" separates lines, so a "\\r" from CRLF files stays on its line
    and is written back unchanged.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def join_lines(lines: list[str], *, trailing_newline: bool = False) -> str:
    """Inverse of ``split_lines``."""
    text = "\n".join(lines)
    if trailing_newline and lines:
        text += "\n"
    return text


def has_trailing_newline(text: str) -> bool:
    return text.endswith("\n")
