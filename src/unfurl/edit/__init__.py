"""Edit reconciliation and persistence."""

from unfurl.edit.persist import SaveOutcome, apply_patch, save_patches
from unfurl.edit.reconcile import EditOutcome, PatchSet, reconcile, reconcile_edit

__all__ = [
    "EditOutcome",
    "PatchSet",
    "SaveOutcome",
    "apply_patch",
    "reconcile",
    "reconcile_edit",
    "save_patches",
]
