"""
Notebook Index Manager - derived, cached index over all notes and chains.

Handles:
- Building the index (entries, backlinks, checksum) from the store listings
- Persisting it atomically as pretty-printed JSON
- Reusing the in-memory cache while per-file signatures are unchanged
- Self-healing when the persisted index disagrees with on-disk documents

The index is a cache, not a source of truth: checksum mismatches and
unreadable index files are repaired by rebuilding, never surfaced as errors.

Cache lifecycle (IndexState):

    Unloaded --load()/refresh()--> Cached(index, signatures)
    Cached   --refresh() sees changed signatures--> Stale --rebuild--> Cached
    any      --invalidate()--> Unloaded

Stale is transient: it only outlives a refresh() call when the rebuild
raises (for example the index write fails). From Stale, load() and refresh()
both go back to disk and rebuild as if nothing were cached.

Notes and chains are listed by two separate directory scans with no
transaction between them; a document written concurrently may appear in one
listing and not the other. The next refresh picks it up.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Union

from breadcrumbs_notebook.config import Config
from breadcrumbs_notebook.core.fs import get_file_signature, read_file_if_exists, write_file_atomic
from breadcrumbs_notebook.core.hashing import compute_digest
from breadcrumbs_notebook.core.schema import validate_notebook_index
from breadcrumbs_notebook.core.store import NotebookDataStore
from breadcrumbs_notebook.models.index import (
    INDEX_VERSION,
    ChainIndexEntry,
    ChainSummary,
    NotebookIndex,
    NoteIndexEntry,
    NoteSummary,
)
from breadcrumbs_notebook.utils.exceptions import IndexFormatError
from breadcrumbs_notebook.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Unloaded:
    """No index in memory."""


@dataclass(frozen=True)
class Cached:
    """Index in memory together with the file signatures it was built from."""

    index: NotebookIndex
    signatures: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Stale:
    """
    Index in memory that no longer matches storage.

    `signatures` are the current on-disk signatures; the index is the last
    good build. It remains the state only when a rebuild fails.
    """

    index: NotebookIndex
    signatures: dict[str, str] = field(default_factory=dict)


IndexState = Union[Unloaded, Cached, Stale]


def _sort_key(entry: dict[str, Any]) -> tuple[str, str]:
    # id first; the full dump breaks ties between files declaring the same id
    return entry["id"], json.dumps(entry, sort_keys=True)


def _note_projection(note: NoteSummary) -> dict[str, Any]:
    return {
        "id": note.id,
        "title": note.title,
        "kind": note.kind.value,
        "tags": sorted(note.tags),
        "snippetHash": note.snippet_hash,
        "snippetCommit": note.snippet_commit,
    }


def _chain_projection(chain: ChainSummary) -> dict[str, Any]:
    return {
        "id": chain.id,
        "title": chain.title,
        "description": chain.description,
        "notes": list(chain.notes),
        "tags": sorted(chain.tags),
    }


def compute_checksum(
    notes: list[NoteSummary] | tuple[NoteSummary, ...],
    chains: list[ChainSummary] | tuple[ChainSummary, ...],
) -> str:
    """
    Digest of the semantic content of all notes and chains.

    Paths and timestamps are excluded and both collections are sorted by id,
    so the result does not depend on listing order, file location or mtimes.
    """
    normalized = {
        "notes": sorted((_note_projection(note) for note in notes), key=_sort_key),
        "chains": sorted((_chain_projection(chain) for chain in chains), key=_sort_key),
    }
    return compute_digest(normalized)


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class NotebookIndexManager:
    """
    Manages the derived notebook index stored on disk.

    One manager owns one index file and one in-memory cache whose lifetime is
    the manager instance. There is no locking: concurrent refreshes race and
    the last atomic write wins.
    """

    def __init__(
        self,
        workspace_root: str | Path,
        store: NotebookDataStore | None = None,
        config: Config | None = None,
    ):
        """
        Initialize the index manager.

        Args:
            workspace_root: Directory containing the hidden notebook root
            store: Store to list documents from (default: a store on the same root)
            config: Optional configuration (defaults to Config())
        """
        config = config or Config()
        self.workspace_root = Path(workspace_root)
        self.store = store or NotebookDataStore(self.workspace_root, config)
        self.index_path = self.store.root / config.storage.index_file
        self.state: IndexState = Unloaded()

    # ═══════════════════════════════════════════════════════════
    # PUBLIC OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def load(self) -> NotebookIndex | None:
        """
        Return the index, preferring the in-memory cache.

        Without a cache, the persisted index is adopted only if its checksum
        matches the current documents; otherwise it is rebuilt.

        Returns:
            The index, or None when no index file exists yet (call refresh)
        """
        if isinstance(self.state, Cached):
            return self.state.index

        raw = await read_file_if_exists(self.index_path)
        if raw is None:
            return None

        try:
            persisted = validate_notebook_index(json.loads(raw))
        except (json.JSONDecodeError, IndexFormatError) as e:
            logger.warning(f"Discarding unreadable index {self.index_path}: {e}")
            return await self.refresh(force=True)

        notes = await self.store.list_notes()
        chains = await self.store.list_chains()
        expected = compute_checksum(notes, chains)
        if persisted.checksum != expected:
            logger.info(
                "Persisted index is out of date, rebuilding",
                extra={"persisted": persisted.checksum, "expected": expected},
            )
            return await self._refresh_from(notes, chains, force=True)

        signatures = await self._capture_signatures(notes, chains)
        self.state = Cached(index=persisted, signatures=signatures)
        logger.debug(f"Adopted persisted index {self.index_path}")
        return persisted

    async def refresh(self, force: bool = False) -> NotebookIndex:
        """
        Rebuild the index unless nothing changed since the last build.

        Args:
            force: Rebuild even when every file signature is unchanged

        Returns:
            The cached index instance when unchanged, otherwise a new index
        """
        notes = await self.store.list_notes()
        chains = await self.store.list_chains()
        return await self._refresh_from(notes, chains, force=force)

    def invalidate(self) -> None:
        """Drop the in-memory cache; the next load() goes back to disk."""
        self.state = Unloaded()

    def compute_checksum(
        self, notes: list[NoteSummary], chains: list[ChainSummary]
    ) -> str:
        """Checksum for the given listings (see module-level compute_checksum)."""
        return compute_checksum(notes, chains)

    # ═══════════════════════════════════════════════════════════
    # INTERNALS
    # ═══════════════════════════════════════════════════════════

    async def _refresh_from(
        self, notes: list[NoteSummary], chains: list[ChainSummary], force: bool
    ) -> NotebookIndex:
        signatures = await self._capture_signatures(notes, chains)
        state = self.state
        if isinstance(state, Cached):
            if not force and state.signatures == signatures:
                logger.debug("Index signatures unchanged, reusing cache")
                return state.index
            self.state = Stale(index=state.index, signatures=signatures)

        index = self._build_index(notes, chains)
        payload = json.dumps(index.to_json_dict(), indent=2, ensure_ascii=False)
        await write_file_atomic(self.index_path, f"{payload}\n")
        self.state = Cached(index=index, signatures=signatures)
        logger.info(
            f"Rebuilt notebook index: {len(index.notes)} notes, {len(index.chains)} chains",
            extra={"checksum": index.checksum, "forced": force},
        )
        return index

    async def _capture_signatures(
        self, notes: list[NoteSummary], chains: list[ChainSummary]
    ) -> dict[str, str]:
        """Per-file fingerprint: semantic fields plus the file's mtime."""
        signatures: dict[str, str] = {}
        for note in notes:
            payload = {
                "type": "note",
                **_note_projection(note),
                "tags": list(note.tags),
                "fileSignature": await get_file_signature(Path(note.path)),
            }
            signatures[note.path] = json.dumps(payload, sort_keys=True)
        for chain in chains:
            payload = {
                "type": "chain",
                **_chain_projection(chain),
                "tags": list(chain.tags),
                "fileSignature": await get_file_signature(Path(chain.path)),
            }
            signatures[chain.path] = json.dumps(payload, sort_keys=True)
        return signatures

    def _relative_path(self, file_path: str) -> str:
        try:
            return str(Path(file_path).relative_to(self.workspace_root))
        except ValueError:
            return file_path

    def _build_index(
        self, notes: list[NoteSummary], chains: list[ChainSummary]
    ) -> NotebookIndex:
        note_entries = {
            note.id: NoteIndexEntry(
                id=note.id,
                title=note.title,
                kind=note.kind,
                tags=note.tags,
                path=self._relative_path(note.path),
                snippet_hash=note.snippet_hash,
                snippet_commit=note.snippet_commit,
            )
            for note in sorted(notes, key=lambda note: note.id)
        }
        chain_entries = {
            chain.id: ChainIndexEntry(
                id=chain.id,
                title=chain.title,
                description=chain.description,
                notes=chain.notes,
                tags=chain.tags,
                path=self._relative_path(chain.path),
            )
            for chain in sorted(chains, key=lambda chain: chain.id)
        }

        # Every known note gets an entry; dangling chain references add their own.
        backlinks: dict[str, set[str]] = {note.id: set() for note in notes}
        for chain in chains:
            for note_id in chain.notes:
                backlinks.setdefault(note_id, set()).add(chain.id)

        return NotebookIndex(
            version=INDEX_VERSION,
            generated_at=_utc_timestamp(),
            notes=note_entries,
            chains=chain_entries,
            backlinks={note_id: sorted(backlinks[note_id]) for note_id in sorted(backlinks)},
            checksum=compute_checksum(notes, chains),
        )
