"""Flattener / Mapping Builder.

Walks a resolved ``FragmentStore`` pre-order, depth-first, in directive
order, and produces the unfurled view: one list of lines plus an
index-aligned mapping from every line to where it came from. The walk
only reads tuples in file order, so the same store always yields the
same view.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from unfurl.config.models import MarkerConfig
from unfurl.core.errors import InternalError
from unfurl.resolve.model import Fragment, FragmentStore, IncludeRef, SourcePath


@dataclass(frozen=True, slots=True)
class Code:
    """Editable line backed by ``line`` (1-based) of ``path``."""

    path: SourcePath
    line: int

    editable = True


@dataclass(frozen=True, slots=True)
class Boundary:
    """Read-only "start of"/"end of" marker around an included file."""

    path: SourcePath
    edge: Literal["start", "end"] = "start"

    editable = False


@dataclass(frozen=True, slots=True)
class Unresolved:
    """Read-only "failed to include" marker; nothing to write back to."""

    path: SourcePath

    editable = False


MappingEntry = Code | Boundary | Unresolved


@dataclass
class FlatView:
    """Unfurled lines and their provenance. ``len(lines) == len(mapping)``."""

    lines: list[str] = field(default_factory=list)
    mapping: list[MappingEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.lines)

    def append(self, text: str, entry: MappingEntry) -> None:
        self.lines.append(text)
        self.mapping.append(entry)

    def text(self, *, trailing_newline: bool = True) -> str:
        body = "\n".join(self.lines)
        return body + "\n" if trailing_newline and self.lines else body

    def index_of(self, path: SourcePath, line: int) -> list[int]:
        """Every flat index showing ``line`` of ``path`` (several when re-included)."""
        target = Code(path, line)
        return [i for i, entry in enumerate(self.mapping) if entry == target]


def _marker(template: str, path: SourcePath) -> str:
    return template.format(path=str(path), name=path.name)


def flatten(
    root: SourcePath,
    store: FragmentStore,
    markers: MarkerConfig | None = None,
) -> FlatView:
    """Build the unfurled view of ``root``.

    Raises:
        InternalError: ``root`` was never resolved into ``store``.
    """
    markers = markers or MarkerConfig()
    fragment = store.get(root)
    if fragment is None:
        raise InternalError.unexpected("root is missing from the fragment store", root=str(root))

    view = FlatView()
    _emit(fragment, store, markers, view)
    return view


def _emit(fragment: Fragment, store: FragmentStore, markers: MarkerConfig, view: FlatView) -> None:
    for entry in fragment.entries:
        if not isinstance(entry, IncludeRef):
            view.append(entry.content, Code(fragment.path, entry.origin_line))
            continue

        target = store.get(entry.target) if entry.resolved else None
        if target is None:
            view.append(_marker(markers.failed_template, entry.target), Unresolved(entry.target))
            continue

        view.append(_marker(markers.start_template, entry.target), Boundary(entry.target, "start"))
        _emit(target, store, markers, view)
        view.append(_marker(markers.end_template, entry.target), Boundary(entry.target, "end"))
