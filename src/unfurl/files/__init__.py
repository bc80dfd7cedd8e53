"""File Store module - raw text reads/writes and line views."""

from unfurl.files.store import (
    FileStore,
    LocalFileStore,
    has_trailing_newline,
    join_lines,
    split_lines,
)

__all__ = ["FileStore", "LocalFileStore", "has_trailing_newline", "join_lines", "split_lines"]
