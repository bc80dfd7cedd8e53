"""Include resolution - fragments, memoization and cycle detection."""

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
from unfurl.resolve.resolver import IncludeResolver, Resolution

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "Fragment",
    "FragmentEntry",
    "FragmentStore",
    "IncludeRef",
    "IncludeResolver",
    "Resolution",
    "SourcePath",
    "TextLine",
    "canonicalize",
]
