"""
Filesystem-backed notebook store.

Layout under the workspace root (names configurable via StorageConfig):

    .breadcrumbs/
        notes/<slug>.md
        chains/<slug>.chain.md
        index.json          (owned by the index manager)

The store is the authoritative document layer: unlike best-effort directory
scans, a listed file that fails to parse raises instead of being skipped.
"""

import asyncio
from pathlib import Path

from breadcrumbs_notebook.config import Config, StorageConfig
from breadcrumbs_notebook.core.documents import (
    parse_chain_markdown,
    parse_note_markdown,
    serialize_chain_markdown,
    serialize_note_markdown,
)
from breadcrumbs_notebook.core.fs import (
    delete_if_exists,
    ensure_directory,
    list_files,
    read_file_if_exists,
    write_file_atomic,
)
from breadcrumbs_notebook.models.chain import Chain
from breadcrumbs_notebook.models.index import ChainSummary, NoteSummary
from breadcrumbs_notebook.models.note import Note
from breadcrumbs_notebook.utils.exceptions import ValidationError
from breadcrumbs_notebook.utils.logger import get_logger
from breadcrumbs_notebook.utils.text import slugify_id

logger = get_logger(__name__)

NOTE_EXTENSION = ".md"
CHAIN_EXTENSION = ".chain.md"


class NotebookDataStore:
    """
    CRUD access to filesystem-backed notes and chains.

    Saves are full replacements written atomically; there is no partial
    update. Reads of missing documents return None.
    """

    def __init__(self, workspace_root: str | Path, config: Config | None = None):
        """
        Initialize the store.

        Args:
            workspace_root: Directory containing the hidden notebook root
            config: Optional configuration (defaults to Config())
        """
        storage: StorageConfig = (config or Config()).storage
        self.workspace_root = Path(workspace_root)
        self.root = self.workspace_root / storage.root_dir
        self.notes_directory = self.root / storage.notes_dir
        self.chains_directory = self.root / storage.chains_dir

    @staticmethod
    def _file_stem(identifier: str) -> str:
        slug = slugify_id(identifier)
        if not slug:
            raise ValidationError(
                f"Identifier {identifier!r} does not produce a usable file name.",
                context={"id": identifier},
            )
        return slug

    def note_path(self, note_id: str) -> Path:
        """Path of the file holding note_id."""
        return self.notes_directory / f"{self._file_stem(note_id)}{NOTE_EXTENSION}"

    def chain_path(self, chain_id: str) -> Path:
        """Path of the file holding chain_id."""
        return self.chains_directory / f"{self._file_stem(chain_id)}{CHAIN_EXTENSION}"

    # ═══════════════════════════════════════════════════════════
    # NOTES
    # ═══════════════════════════════════════════════════════════

    async def save_note(self, note: Note) -> Path:
        """
        Serialize and atomically write a note.

        Returns:
            Path of the written file

        Raises:
            HashMismatchError: If the note's snippet hash does not match its code
            FrontmatterValidationError: If the metadata is invalid
        """
        file_path = self.note_path(note.metadata.id)
        serialized = serialize_note_markdown(note)
        await write_file_atomic(file_path, serialized)
        logger.debug(f"Saved note {note.metadata.id} to {file_path}")
        return file_path

    async def read_note(self, note_id: str) -> Note | None:
        """Read and parse a note; None when its file does not exist."""
        raw = await read_file_if_exists(self.note_path(note_id))
        if raw is None:
            return None
        return parse_note_markdown(raw)

    async def delete_note(self, note_id: str) -> bool:
        """Delete a note; returns False when it did not exist."""
        deleted = await delete_if_exists(self.note_path(note_id))
        if deleted:
            logger.debug(f"Deleted note {note_id}")
        return deleted

    async def list_notes(self) -> list[NoteSummary]:
        """
        Parse every note file and summarize it.

        Files removed between listing and reading are skipped. Parse errors
        propagate.
        """
        await ensure_directory(self.notes_directory)
        files = [
            file
            for file in await list_files(self.notes_directory)
            if file.name.endswith(NOTE_EXTENSION) and not file.name.endswith(CHAIN_EXTENSION)
        ]
        contents = await asyncio.gather(*(read_file_if_exists(file) for file in files))

        summaries: list[NoteSummary] = []
        for file, raw in zip(files, contents):
            if raw is None:
                continue
            note = parse_note_markdown(raw)
            snippet = note.metadata.snippet
            summaries.append(
                NoteSummary(
                    id=note.metadata.id,
                    title=note.metadata.title,
                    kind=note.metadata.kind,
                    tags=note.metadata.tags,
                    path=str(file),
                    snippet_hash=snippet.hash if snippet else None,
                    snippet_commit=snippet.commit if snippet else None,
                )
            )
        return summaries

    # ═══════════════════════════════════════════════════════════
    # CHAINS
    # ═══════════════════════════════════════════════════════════

    async def save_chain(self, chain: Chain) -> Path:
        """Serialize and atomically write a chain; returns the file path."""
        file_path = self.chain_path(chain.metadata.id)
        serialized = serialize_chain_markdown(chain)
        await write_file_atomic(file_path, serialized)
        logger.debug(f"Saved chain {chain.metadata.id} to {file_path}")
        return file_path

    async def read_chain(self, chain_id: str) -> Chain | None:
        """Read and parse a chain; None when its file does not exist."""
        raw = await read_file_if_exists(self.chain_path(chain_id))
        if raw is None:
            return None
        return parse_chain_markdown(raw)

    async def delete_chain(self, chain_id: str) -> bool:
        """Delete a chain; returns False when it did not exist."""
        deleted = await delete_if_exists(self.chain_path(chain_id))
        if deleted:
            logger.debug(f"Deleted chain {chain_id}")
        return deleted

    async def list_chains(self) -> list[ChainSummary]:
        """Parse every chain file and summarize it (same skipping rules as list_notes)."""
        await ensure_directory(self.chains_directory)
        files = [
            file
            for file in await list_files(self.chains_directory)
            if file.name.endswith(CHAIN_EXTENSION)
        ]
        contents = await asyncio.gather(*(read_file_if_exists(file) for file in files))

        summaries: list[ChainSummary] = []
        for file, raw in zip(files, contents):
            if raw is None:
                continue
            chain = parse_chain_markdown(raw)
            summaries.append(
                ChainSummary(
                    id=chain.metadata.id,
                    title=chain.metadata.title,
                    description=chain.metadata.description,
                    notes=chain.metadata.notes,
                    tags=chain.metadata.tags,
                    path=str(file),
                )
            )
        return summaries
