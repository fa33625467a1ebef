"""Services built on the document store: index management and conflict detection."""

from breadcrumbs_notebook.services.conflict_detector import detect_snippet_conflict
from breadcrumbs_notebook.services.index_manager import (
    Cached,
    IndexState,
    NotebookIndexManager,
    Stale,
    Unloaded,
    compute_checksum,
)

__all__ = [
    "NotebookIndexManager",
    "IndexState",
    "Unloaded",
    "Cached",
    "Stale",
    "compute_checksum",
    "detect_snippet_conflict",
]
