"""
Chain models.

A chain is an ordered list of note ids with accompanying narrative. The ids
are not required to reference existing notes.
"""

from pydantic import BaseModel


class ChainMetadata(BaseModel):
    """Validated chain header."""

    model_config = {"frozen": True}

    id: str
    title: str
    description: str | None = None
    notes: tuple[str, ...]
    tags: tuple[str, ...] = ()
    created_at: str | None = None
    updated_at: str | None = None


class Chain(BaseModel):
    """Hydrated chain document with markdown commentary."""

    model_config = {"frozen": True}

    metadata: ChainMetadata
    content: str = ""
