"""
Index models.

Summaries are what the store returns from its listing operations (absolute
file paths). Index entries are the same projections persisted in index.json
with workspace-relative paths. JSON keys use camelCase aliases.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

from breadcrumbs_notebook.models.note import NoteKind

INDEX_VERSION = 1

_ALIASED = {"frozen": True, "populate_by_name": True}


class NoteSummary(BaseModel):
    """Lightweight description of a stored note."""

    model_config = _ALIASED

    id: str
    title: str
    kind: NoteKind
    tags: tuple[str, ...] = ()
    path: str
    snippet_hash: str | None = Field(default=None, alias="snippetHash")
    snippet_commit: str | None = Field(default=None, alias="snippetCommit")


class ChainSummary(BaseModel):
    """Lightweight description of a stored chain."""

    model_config = _ALIASED

    id: str
    title: str
    description: str | None = None
    notes: tuple[str, ...]
    tags: tuple[str, ...] = ()
    path: str


class NoteIndexEntry(NoteSummary):
    """Note entry in the persisted index (path relative to the workspace)."""


class ChainIndexEntry(ChainSummary):
    """Chain entry in the persisted index (path relative to the workspace)."""


class NotebookIndex(BaseModel):
    """
    Derived index over all notes and chains.

    Never edited by hand: the index manager rebuilds it wholesale on every
    refresh. The checksum covers only semantic content, so it is stable across
    re-serialization, storage enumeration order and file timestamps.
    """

    model_config = _ALIASED

    version: Literal[1] = INDEX_VERSION
    generated_at: str = Field(..., alias="generatedAt")
    notes: dict[str, NoteIndexEntry] = Field(default_factory=dict)
    chains: dict[str, ChainIndexEntry] = Field(default_factory=dict)
    backlinks: dict[str, list[str]] = Field(default_factory=dict)
    checksum: str

    def to_json_dict(self) -> dict[str, Any]:
        """Plain dict in the on-disk shape (camelCase keys, unset optionals dropped)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def backlinks_for(self, note_id: str) -> list[str]:
        """Chain ids referencing note_id (empty when none)."""
        return list(self.backlinks.get(note_id, []))
