"""Summary formatting utilities for consistent terminal output.

Design principles:
- Every summary fits on one line (~80 chars max)
- Paths shown relative to the root file's directory when possible
- Grammatically correct (1 file vs 2 files)
"""

from __future__ import annotations

from pathlib import Path


def display_path(path: Path, base: Path | None = None) -> str:
    """Show ``path`` relative to ``base`` when it lives below it.

    Examples:
        /src/app/inc/b.h, base=/src/app -> inc/b.h
        /usr/include/x.h, base=/src/app -> /usr/include/x.h
    """
    if base is not None and path.is_relative_to(base):
        return path.relative_to(base).as_posix()
    return str(path)


def compress_path(path: str, max_len: int = 30) -> str:
    """Compress path to fit within max_len.

    Examples:
        src/drivers/uart/regs.h -> src/.../regs.h
        short/path.h -> short/path.h (unchanged)
    """
    if len(path) <= max_len:
        return path

    parts = path.split("/")
    if len(parts) <= 2:
        return path

    compressed = f"{parts[0]}/.../{parts[-1]}"
    if len(compressed) <= max_len:
        return compressed

    return parts[-1]


def format_path_list(
    paths: list[str],
    *,
    max_total: int = 50,
    max_shown: int = 3,
    compress: bool = True,
) -> str:
    """Format a list of paths, compressing as needed.

    Examples:
        ["a.c"] -> "a.c"
        ["a.c", "b.h"] -> "a.c, b.h"
        ["a.c", "b.h", "c.h", "d.h"] -> "a.c, b.h, +2 more"
    """
    if not paths:
        return ""

    display_paths = [compress_path(p, 25) if compress else p for p in paths]

    if len(display_paths) == 1:
        return display_paths[0]

    result = ", ".join(display_paths[:max_shown])

    if len(display_paths) > max_shown:
        result = ", ".join(display_paths[:2]) + f", +{len(display_paths) - 2} more"

    if len(result) > max_total:
        result = f"{display_paths[0]}, +{len(display_paths) - 1} more"

    if len(result) > max_total:
        return f"{len(paths)} files"

    return result


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return "1 file" / "3 files" style counts."""
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"
