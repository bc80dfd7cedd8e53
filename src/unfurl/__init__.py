"""unfurl - expand local #include directives into one editable view.

Edits made against the view are mapped back to (file, line) and written
into the original files.
"""

from unfurl.session import SessionManager, UnfurlSession, apply_edit, save, unfurl

__version__ = "0.1.0"

__all__ = ["SessionManager", "UnfurlSession", "apply_edit", "save", "unfurl", "__version__"]
