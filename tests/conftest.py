"""Shared fixtures for notebook tests.

Every test gets a fresh temporary workspace; stores and managers are cheap
to build so fixtures use function scope.
"""

from pathlib import Path

import pytest

from breadcrumbs_notebook.core.hashing import compute_snippet_hash
from breadcrumbs_notebook.core.store import NotebookDataStore
from breadcrumbs_notebook.models import Chain, ChainMetadata, Note, NoteKind, NoteMetadata, Snippet
from breadcrumbs_notebook.services.index_manager import NotebookIndexManager

SAMPLE_SNIPPET = "console.log('hello world');"
SAMPLE_HASH = compute_snippet_hash(SAMPLE_SNIPPET)

SAMPLE_NOTE = f"""---
id: note-1
title: Inspect Logs
kind: analysis
createdAt: 2024-01-01T10:00:00.000Z
updatedAt: 2024-01-01T10:15:00.000Z
tags:
  - logs
links:
  - docs/logging
snippet:
  hash: {SAMPLE_HASH}
  language: ts
---
Review the error budget dashboard and capture unusual spikes.

```ts
{SAMPLE_SNIPPET}
```
"""


def make_note(
    note_id: str = "note-a",
    title: str = "Establish Context",
    code: str | None = "function compute(){return 7;}",
    content: str = "Gather initial context from the issue tracker.",
    tags: tuple[str, ...] = ("context",),
    kind: NoteKind = NoteKind.OBSERVATION,
) -> Note:
    """Build a valid note, with a consistent snippet when code is given."""
    snippet = Snippet.from_code(code, language="ts") if code is not None else None
    return Note(
        metadata=NoteMetadata(
            id=note_id,
            title=title,
            kind=kind,
            tags=tags,
            snippet=snippet.to_meta() if snippet else None,
        ),
        content=content,
        snippet=snippet,
    )


def make_chain(
    chain_id: str = "chain-a",
    notes: tuple[str, ...] = ("note-a",),
    title: str = "Investigation",
    description: str | None = "Walk through discovery steps.",
) -> Chain:
    """Build a valid chain."""
    return Chain(
        metadata=ChainMetadata(
            id=chain_id,
            title=title,
            description=description,
            notes=notes,
            tags=("workflow",),
        ),
        content="Follow up with stakeholders.",
    )


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty workspace directory."""
    return tmp_path


@pytest.fixture
def store(workspace: Path) -> NotebookDataStore:
    """Store rooted in the temporary workspace."""
    return NotebookDataStore(workspace)


@pytest.fixture
def manager(workspace: Path, store: NotebookDataStore) -> NotebookIndexManager:
    """Index manager sharing the workspace store."""
    return NotebookIndexManager(workspace, store=store)


@pytest.fixture
async def seeded_store(store: NotebookDataStore) -> NotebookDataStore:
    """Store holding note-a and chain-a."""
    await store.save_note(make_note())
    await store.save_chain(make_chain())
    return store


@pytest.fixture
def note_factory():
    """Factory for valid notes (see make_note)."""
    return make_note


@pytest.fixture
def chain_factory():
    """Factory for valid chains (see make_chain)."""
    return make_chain


@pytest.fixture
def sample_note_markdown() -> str:
    """Analysis note with tags, links, timestamps and a ts snippet."""
    return SAMPLE_NOTE
