"""
Markdown documents for notes and chains.

Notes may embed one fenced code block holding the snippet source; its hash is
declared in the `snippet` header map. Parsing trusts the declared hash,
serialization recomputes it and refuses to write a mismatch.
"""

import re

from breadcrumbs_notebook.core.frontmatter import (
    parse_frontmatter_document,
    serialize_frontmatter_document,
)
from breadcrumbs_notebook.core.hashing import compute_snippet_hash
from breadcrumbs_notebook.core.schema import (
    build_chain_metadata,
    build_note_metadata,
    chain_metadata_fields,
    note_metadata_fields,
    snippet_meta_fields,
)
from breadcrumbs_notebook.models.chain import Chain
from breadcrumbs_notebook.models.note import Note, Snippet, SnippetMeta
from breadcrumbs_notebook.utils.exceptions import (
    HashMismatchError,
    MissingSnippetError,
    ValidationError,
)

CODE_FENCE = "```"
CODE_FENCE_PATTERN = re.compile(r"```(\w+)?\n(.*?)```", re.DOTALL)


def _extract_snippet(
    body: str, declared: SnippetMeta | None
) -> tuple[str, Snippet | None]:
    """
    Pull the first fenced code block out of a note body.

    Returns:
        (remaining content, snippet) where content is trimmed

    Raises:
        MissingSnippetError: If snippet metadata was declared but no block exists
    """
    match = CODE_FENCE_PATTERN.search(body)
    if match is None:
        if declared is not None:
            raise MissingSnippetError(
                "Snippet metadata declared without a fenced code block.",
                context={"hash": declared.hash},
            )
        return body.strip(), None

    fenced_language, code = match.group(1), match.group(2).rstrip()
    snippet = Snippet(
        code=code,
        hash=declared.hash if declared else compute_snippet_hash(code),
        commit=declared.commit if declared else None,
        path=declared.path if declared else None,
        language=(declared.language if declared else None) or fenced_language,
    )
    remainder = f"{body[: match.start()]}{body[match.end() :]}".strip()
    return remainder, snippet


def parse_note_markdown(raw: str) -> Note:
    """
    Parse a markdown note into a Note.

    Raises:
        FrontmatterError: If the header is structurally invalid
        FrontmatterValidationError: If a header field is invalid
        MissingSnippetError: If snippet metadata has no fenced block
    """
    parsed = parse_frontmatter_document(raw)
    metadata = build_note_metadata(parsed.values())
    content, snippet = _extract_snippet(parsed.body, metadata.snippet)
    metadata = metadata.model_copy(
        update={"snippet": snippet.to_meta() if snippet is not None else None}
    )
    return Note(metadata=metadata, content=content, snippet=snippet)


def serialize_note_markdown(note: Note) -> str:
    """
    Serialize a note into markdown with a header and snippet fence.

    The snippet (not the header's snippet metadata) is authoritative for the
    `snippet` header map. The snippet fence follows the commentary unless the
    commentary contains backtick fences of its own, in which case it goes
    first so that it is still the first fence read back.

    Raises:
        HashMismatchError: If the snippet hash does not match its code
        ValidationError: If the code would not read back byte-for-byte
        FrontmatterValidationError: If a header field is invalid
    """
    content = note.content.strip()
    fields = note_metadata_fields(note.metadata)
    fields["snippet"] = None
    snippet_block = ""
    if note.snippet is not None:
        code = note.snippet.code
        computed = compute_snippet_hash(code)
        if note.snippet.hash != computed:
            raise HashMismatchError(note.snippet.hash, computed)
        if code != code.rstrip():
            # Parsing trims trailing whitespace, which would orphan the hash.
            raise ValidationError(
                "Snippet code must not end with whitespace; use Snippet.from_code to trim it.",
                context={"note_id": note.metadata.id},
            )
        if CODE_FENCE in code:
            raise ValidationError(
                f"Snippet code must not contain the {CODE_FENCE} fence sequence.",
                context={"note_id": note.metadata.id},
            )
        language = note.snippet.language or ""
        snippet_block = "\n".join([f"{CODE_FENCE}{language}", code, CODE_FENCE])
        fields["snippet"] = snippet_meta_fields(note.snippet)
    validated = build_note_metadata(fields)

    if snippet_block and CODE_FENCE in content:
        sections = [snippet_block, content]
    else:
        sections = [section for section in (content, snippet_block) if section]
    body = "\n\n".join(sections)
    return serialize_frontmatter_document(note_metadata_fields(validated), body)


def parse_chain_markdown(raw: str) -> Chain:
    """
    Parse a chain markdown document into a Chain.

    Raises:
        FrontmatterError: If the header is structurally invalid
        FrontmatterValidationError: If a header field is invalid
    """
    parsed = parse_frontmatter_document(raw)
    metadata = build_chain_metadata(parsed.values())
    return Chain(metadata=metadata, content=parsed.body.strip())


def serialize_chain_markdown(chain: Chain) -> str:
    """Serialize a chain into markdown with its header."""
    validated = build_chain_metadata(chain_metadata_fields(chain.metadata))
    return serialize_frontmatter_document(chain_metadata_fields(validated), chain.content.strip())
