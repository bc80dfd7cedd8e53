"""Flattening - the unfurled view and its line mapping."""

from unfurl.flatten.view import (
    Boundary,
    Code,
    FlatView,
    MappingEntry,
    Unresolved,
    flatten,
)

__all__ = ["Boundary", "Code", "FlatView", "MappingEntry", "Unresolved", "flatten"]
