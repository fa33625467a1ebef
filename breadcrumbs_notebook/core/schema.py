"""
Typed builders for notebook metadata.

Each builder consumes an untyped key/value map (parsed frontmatter, a model
projection, or decoded index JSON) and returns a validated, immutable model.
Validation is field by field and fails fast with FrontmatterValidationError
naming the offending field. Values are never coerced across types.
"""

import re
from datetime import datetime
from typing import Any

from breadcrumbs_notebook.models.chain import ChainMetadata
from breadcrumbs_notebook.models.index import (
    INDEX_VERSION,
    ChainIndexEntry,
    NotebookIndex,
    NoteIndexEntry,
)
from breadcrumbs_notebook.models.note import NoteKind, NoteMetadata, SnippetMeta
from breadcrumbs_notebook.utils.exceptions import FrontmatterValidationError, IndexFormatError
from breadcrumbs_notebook.utils.text import unique_strings

SUPPORTED_NOTE_KINDS = tuple(kind.value for kind in NoteKind)

# Extended calendar dates only; fromisoformat also takes week and basic forms.
CALENDAR_TIMESTAMP_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}"
    r"(?:[Tt ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:[Zz]|[+-]\d{2}:\d{2})?)?$"
)


def _required_string(raw: dict[str, Any], key: str, label: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise FrontmatterValidationError(f"{label} must be a non-empty string.", field=key)
    return value.strip()


def _optional_string(raw: dict[str, Any], key: str, label: str) -> str | None:
    """Optional field that must be a non-empty string when present."""
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise FrontmatterValidationError(
            f"{label} must be a non-empty string when provided.", field=key
        )
    return value.strip()


def _timestamp(raw: dict[str, Any], key: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise FrontmatterValidationError(f"{key} must be a string when provided.", field=key)
    assert_iso_timestamp(value, key)
    return value


def assert_iso_timestamp(value: str, field: str) -> None:
    """Raise unless value parses as an ISO-8601 date or date-time."""
    candidate = value.strip()
    if CALENDAR_TIMESTAMP_PATTERN.match(candidate) is None:
        raise FrontmatterValidationError(
            f"{field} must be an ISO-8601 timestamp.", field=field, context={"value": value}
        )
    if candidate.endswith(("Z", "z")):
        candidate = f"{candidate[:-1]}+00:00"
    try:
        datetime.fromisoformat(candidate)
    except ValueError as e:
        raise FrontmatterValidationError(
            f"{field} must be an ISO-8601 timestamp.", field=field, context={"value": value}
        ) from e


def normalize_string_array(value: Any, field: str) -> list[str]:
    """
    Validate an array of strings.

    Entries are trimmed, empty entries dropped and duplicates removed by
    first occurrence. A missing value is an empty array.
    """
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise FrontmatterValidationError(f"{field} must be an array of strings.", field=field)
    for entry in value:
        if not isinstance(entry, str):
            raise FrontmatterValidationError(f"{field} must be an array of strings.", field=field)
    return unique_strings(value)


def _expect_mapping(value: Any, label: str, field: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise FrontmatterValidationError(f"{label} must be an object.", field=field)
    return value


def build_snippet_meta(value: Any) -> SnippetMeta | None:
    """Validate snippet header metadata (None when absent)."""
    if value is None:
        return None
    data = _expect_mapping(value, "Snippet metadata", "snippet")
    hash_value = data.get("hash")
    if not isinstance(hash_value, str) or not hash_value.strip():
        raise FrontmatterValidationError(
            "Snippet metadata requires a non-empty hash.", field="snippet.hash"
        )
    return SnippetMeta(
        hash=hash_value.strip(),
        language=_optional_string(data, "language", "Snippet language"),
        commit=_optional_string(data, "commit", "Snippet commit"),
        path=_optional_string(data, "path", "Snippet path"),
    )


def build_note_metadata(raw: dict[str, Any]) -> NoteMetadata:
    """
    Validate a note header.

    Args:
        raw: Header fields keyed by their on-disk names (createdAt, updatedAt, ...)

    Returns:
        Validated NoteMetadata

    Raises:
        FrontmatterValidationError: On the first invalid field
    """
    note_id = _required_string(raw, "id", "Note id")
    title = _required_string(raw, "title", "Note title")
    kind = raw.get("kind")
    if not isinstance(kind, str) or kind not in SUPPORTED_NOTE_KINDS:
        raise FrontmatterValidationError(
            f"Note kind must be one of: {', '.join(SUPPORTED_NOTE_KINDS)}.", field="kind"
        )
    created_at = _timestamp(raw, "createdAt")
    updated_at = _timestamp(raw, "updatedAt")
    return NoteMetadata(
        id=note_id,
        title=title,
        kind=NoteKind(kind),
        tags=tuple(normalize_string_array(raw.get("tags"), "tags")),
        links=tuple(normalize_string_array(raw.get("links"), "links")),
        created_at=created_at,
        updated_at=updated_at,
        snippet=build_snippet_meta(raw.get("snippet")),
    )


def build_chain_metadata(raw: dict[str, Any]) -> ChainMetadata:
    """
    Validate a chain header.

    The notes list keeps its order; at least one non-empty id must survive
    normalization. Note ids are not checked against stored notes.
    """
    chain_id = _required_string(raw, "id", "Chain id")
    title = _required_string(raw, "title", "Chain title")
    notes = normalize_string_array(raw.get("notes"), "notes")
    if not notes:
        raise FrontmatterValidationError(
            "Chain notes must be a non-empty array of note ids.", field="notes"
        )
    created_at = _timestamp(raw, "createdAt")
    updated_at = _timestamp(raw, "updatedAt")
    description = raw.get("description")
    if description is not None and not isinstance(description, str):
        raise FrontmatterValidationError(
            "Chain description must be a string when provided.", field="description"
        )
    return ChainMetadata(
        id=chain_id,
        title=title,
        description=description,
        notes=tuple(notes),
        tags=tuple(normalize_string_array(raw.get("tags"), "tags")),
        created_at=created_at,
        updated_at=updated_at,
    )


def snippet_meta_fields(meta: SnippetMeta) -> dict[str, Any]:
    """On-disk `snippet` header map."""
    return {
        "hash": meta.hash,
        "commit": meta.commit,
        "path": meta.path,
        "language": meta.language,
    }


def note_metadata_fields(metadata: NoteMetadata) -> dict[str, Any]:
    """On-disk header fields for a note, in serialization order."""
    snippet = snippet_meta_fields(metadata.snippet) if metadata.snippet is not None else None
    return {
        "id": metadata.id,
        "title": metadata.title,
        "kind": metadata.kind.value,
        "tags": list(metadata.tags),
        "links": list(metadata.links),
        "createdAt": metadata.created_at,
        "updatedAt": metadata.updated_at,
        "snippet": snippet,
    }


def chain_metadata_fields(metadata: ChainMetadata) -> dict[str, Any]:
    """On-disk header fields for a chain, in serialization order."""
    return {
        "id": metadata.id,
        "title": metadata.title,
        "description": metadata.description,
        "notes": list(metadata.notes),
        "tags": list(metadata.tags),
        "createdAt": metadata.created_at,
        "updatedAt": metadata.updated_at,
    }


def _index_path(data: dict[str, Any], label: str) -> str:
    path = data.get("path")
    if not isinstance(path, str) or not path.strip():
        raise IndexFormatError(f"{label} index path must be a non-empty string.")
    return path.strip()


def _validate_note_entry(value: Any) -> NoteIndexEntry:
    if not isinstance(value, dict):
        raise IndexFormatError("Note index entry must be an object.")
    snippet_hash = value.get("snippetHash")
    snippet_commit = value.get("snippetCommit")
    metadata = build_note_metadata(
        {
            "id": value.get("id"),
            "title": value.get("title"),
            "kind": value.get("kind"),
            "tags": value.get("tags"),
            "snippet": {"hash": snippet_hash, "commit": snippet_commit}
            if snippet_hash is not None
            else None,
        }
    )
    return NoteIndexEntry(
        id=metadata.id,
        title=metadata.title,
        kind=metadata.kind,
        tags=metadata.tags,
        path=_index_path(value, "Note"),
        snippet_hash=metadata.snippet.hash if metadata.snippet else None,
        snippet_commit=metadata.snippet.commit if metadata.snippet else None,
    )


def _validate_chain_entry(value: Any) -> ChainIndexEntry:
    if not isinstance(value, dict):
        raise IndexFormatError("Chain index entry must be an object.")
    metadata = build_chain_metadata(
        {
            "id": value.get("id"),
            "title": value.get("title"),
            "description": value.get("description"),
            "notes": value.get("notes"),
            "tags": value.get("tags"),
        }
    )
    return ChainIndexEntry(
        id=metadata.id,
        title=metadata.title,
        description=metadata.description,
        notes=metadata.notes,
        tags=metadata.tags,
        path=_index_path(value, "Chain"),
    )


def validate_notebook_index(raw: Any) -> NotebookIndex:
    """
    Validate index data loaded from disk.

    Raises:
        IndexFormatError: If the shape, version or any entry is invalid
    """
    if not isinstance(raw, dict):
        raise IndexFormatError("Notebook index must be an object.")
    if raw.get("version") != INDEX_VERSION:
        raise IndexFormatError(f"Notebook index version must be {INDEX_VERSION}.")
    generated_at = raw.get("generatedAt")
    if not isinstance(generated_at, str):
        raise IndexFormatError("Notebook index generatedAt must be a string.")
    checksum = raw.get("checksum")
    if not isinstance(checksum, str) or not checksum.strip():
        raise IndexFormatError("Notebook index checksum must be a non-empty string.")

    notes = raw.get("notes")
    chains = raw.get("chains")
    backlinks = raw.get("backlinks")
    for label, section in (("notes", notes), ("chains", chains), ("backlinks", backlinks)):
        if not isinstance(section, dict):
            raise IndexFormatError(f"Notebook index {label} must be an object.")

    try:
        assert_iso_timestamp(generated_at, "generatedAt")
        note_entries = {key: _validate_note_entry(value) for key, value in notes.items()}
        chain_entries = {key: _validate_chain_entry(value) for key, value in chains.items()}
        backlink_entries = {
            key: normalize_string_array(value, f"backlinks.{key}")
            for key, value in backlinks.items()
        }
    except FrontmatterValidationError as e:
        raise IndexFormatError(f"Invalid notebook index entry: {e.message}", context=e.context) from e

    return NotebookIndex(
        version=INDEX_VERSION,
        generated_at=generated_at,
        notes=note_entries,
        chains=chain_entries,
        backlinks=backlink_entries,
        checksum=checksum.strip(),
    )
