"""
breadcrumbs-notebook: filesystem-backed notes and chains with a derived index.

Public API:
- NotebookDataStore: atomic CRUD for note and chain markdown files
- NotebookIndexManager: cached, self-healing index with backlinks
- parse/serialize helpers for notes and chains
- compute_snippet_hash, detect_snippet_conflict: snippet integrity
"""

from breadcrumbs_notebook.config import Config
from breadcrumbs_notebook.core.documents import (
    parse_chain_markdown,
    parse_note_markdown,
    serialize_chain_markdown,
    serialize_note_markdown,
)
from breadcrumbs_notebook.core.hashing import compute_snippet_hash
from breadcrumbs_notebook.core.schema import (
    build_chain_metadata,
    build_note_metadata,
    validate_notebook_index,
)
from breadcrumbs_notebook.core.store import NotebookDataStore
from breadcrumbs_notebook.models import (
    Chain,
    ChainIndexEntry,
    ChainMetadata,
    ChainSummary,
    ConflictResult,
    ConflictStatus,
    NotebookIndex,
    Note,
    NoteIndexEntry,
    NoteKind,
    NoteMetadata,
    NoteSummary,
    Snippet,
    SnippetMeta,
)
from breadcrumbs_notebook.services import NotebookIndexManager, detect_snippet_conflict

__version__ = "0.1.0"

__all__ = [
    "Config",
    "NotebookDataStore",
    "NotebookIndexManager",
    "parse_note_markdown",
    "serialize_note_markdown",
    "parse_chain_markdown",
    "serialize_chain_markdown",
    "build_note_metadata",
    "build_chain_metadata",
    "validate_notebook_index",
    "compute_snippet_hash",
    "detect_snippet_conflict",
    "Note",
    "NoteKind",
    "NoteMetadata",
    "Snippet",
    "SnippetMeta",
    "Chain",
    "ChainMetadata",
    "NoteSummary",
    "ChainSummary",
    "NoteIndexEntry",
    "ChainIndexEntry",
    "NotebookIndex",
    "ConflictStatus",
    "ConflictResult",
]
