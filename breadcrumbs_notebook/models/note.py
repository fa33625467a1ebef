"""
Note models.

A note is a markdown document with a metadata header and an optional
fenced code snippet whose SHA-256 hash is recorded in the header.
"""

from enum import Enum

from pydantic import BaseModel, Field

from breadcrumbs_notebook.core.hashing import compute_snippet_hash


class NoteKind(str, Enum):
    """Kinds of notes a notebook can hold."""

    OBSERVATION = "observation"
    ANALYSIS = "analysis"
    DECISION = "decision"
    TASK = "task"
    REFERENCE = "reference"


class SnippetMeta(BaseModel):
    """Header metadata describing a note's code snippet."""

    model_config = {"frozen": True}

    hash: str = Field(..., description="SHA-256 of the snippet source")
    language: str | None = Field(default=None, description="Fence language tag")
    commit: str | None = Field(default=None, description="Commit the snippet was taken from")
    path: str | None = Field(default=None, description="Source file the snippet was taken from")

    def to_meta(self) -> "SnippetMeta":
        """Project onto the header fields only."""
        return SnippetMeta(
            hash=self.hash, language=self.language, commit=self.commit, path=self.path
        )


class Snippet(SnippetMeta):
    """
    Snippet metadata plus the concrete source code.

    A snippet is consistent when hash == compute_snippet_hash(code).
    Serialization refuses inconsistent snippets.
    """

    code: str = Field(..., description="Snippet source code")

    @classmethod
    def from_code(
        cls,
        code: str,
        language: str | None = None,
        commit: str | None = None,
        path: str | None = None,
    ) -> "Snippet":
        """
        Build a consistent snippet from source code.

        Trailing whitespace is trimmed the same way parsing trims fenced code,
        then the hash is computed from the trimmed source.
        """
        trimmed = code.rstrip()
        return cls(
            code=trimmed,
            hash=compute_snippet_hash(trimmed),
            language=language,
            commit=commit,
            path=path,
        )

    def is_consistent(self) -> bool:
        """True when the stored hash matches the code."""
        return self.hash == compute_snippet_hash(self.code)


class NoteMetadata(BaseModel):
    """Validated note header."""

    model_config = {"frozen": True}

    id: str
    title: str
    kind: NoteKind
    tags: tuple[str, ...] = ()
    links: tuple[str, ...] = ()
    created_at: str | None = None
    updated_at: str | None = None
    snippet: SnippetMeta | None = None


class Note(BaseModel):
    """Fully hydrated note: header, markdown commentary and optional snippet."""

    model_config = {"frozen": True}

    metadata: NoteMetadata
    content: str = ""
    snippet: Snippet | None = None
