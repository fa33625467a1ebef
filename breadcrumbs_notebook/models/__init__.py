"""
Data models for the breadcrumbs notebook.

Document models:
- Note, NoteMetadata, NoteKind: notes with optional hashed code snippets
- Snippet, SnippetMeta: snippet source and header metadata
- Chain, ChainMetadata: ordered note references with narrative

Derived models:
- NoteSummary, ChainSummary: store listing projections
- NoteIndexEntry, ChainIndexEntry, NotebookIndex: persisted index
- ConflictStatus, ConflictResult: snippet conflict reports
"""

from breadcrumbs_notebook.models.chain import Chain, ChainMetadata
from breadcrumbs_notebook.models.conflict import ConflictResult, ConflictStatus
from breadcrumbs_notebook.models.index import (
    INDEX_VERSION,
    ChainIndexEntry,
    ChainSummary,
    NotebookIndex,
    NoteIndexEntry,
    NoteSummary,
)
from breadcrumbs_notebook.models.note import Note, NoteKind, NoteMetadata, Snippet, SnippetMeta

__all__ = [
    # Document models
    "Note",
    "NoteKind",
    "NoteMetadata",
    "Snippet",
    "SnippetMeta",
    "Chain",
    "ChainMetadata",
    # Index models
    "INDEX_VERSION",
    "NoteSummary",
    "ChainSummary",
    "NoteIndexEntry",
    "ChainIndexEntry",
    "NotebookIndex",
    # Conflict models
    "ConflictStatus",
    "ConflictResult",
]
