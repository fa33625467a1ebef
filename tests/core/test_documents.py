"""
Tests for note and chain markdown documents.

Tests cover:
1. Parsing notes with and without snippets
2. Serialization guards (hash mismatch, trailing whitespace, fences in code)
3. Chain round trips
"""

import pytest

from breadcrumbs_notebook.core.documents import (
    parse_chain_markdown,
    parse_note_markdown,
    serialize_chain_markdown,
    serialize_note_markdown,
)
from breadcrumbs_notebook.core.hashing import compute_snippet_hash
from breadcrumbs_notebook.models import Note, NoteKind, NoteMetadata, Snippet
from breadcrumbs_notebook.utils.exceptions import (
    FrontmatterValidationError,
    HashMismatchError,
    MissingSnippetError,
    ValidationError,
)


class TestParseNote:
    """Tests for parse_note_markdown."""

    def test_parses_sample_note(self, sample_note_markdown):
        """Test header, commentary and snippet are all recovered."""
        note = parse_note_markdown(sample_note_markdown)

        assert note.metadata.id == "note-1"
        assert note.metadata.kind == NoteKind.ANALYSIS
        assert note.metadata.tags == ("logs",)
        assert note.metadata.links == ("docs/logging",)
        assert note.metadata.created_at == "2024-01-01T10:00:00.000Z"
        assert note.content == "Review the error budget dashboard and capture unusual spikes."
        assert note.snippet is not None
        assert note.snippet.code == "console.log('hello world');"
        assert note.snippet.language == "ts"
        assert note.snippet.is_consistent()
        assert note.metadata.snippet == note.snippet.to_meta()

    def test_note_without_snippet(self):
        """Test a note without a fence has no snippet."""
        note = parse_note_markdown("---\nid: n\ntitle: T\nkind: task\n---\n\nJust text.\n")

        assert note.snippet is None
        assert note.metadata.snippet is None
        assert note.content == "Just text."

    def test_undeclared_fence_is_hashed(self):
        """Test a fence without header metadata still yields a snippet."""
        note = parse_note_markdown(
            "---\nid: n\ntitle: T\nkind: task\n---\nIntro\n\n```py\nprint(1)\n```\n"
        )

        assert note.snippet.hash == compute_snippet_hash("print(1)")
        assert note.snippet.language == "py"
        assert note.content == "Intro"

    def test_declared_hash_is_trusted(self):
        """Test parsing keeps the declared hash even when it is stale."""
        note = parse_note_markdown(
            "---\nid: n\ntitle: T\nkind: task\nsnippet:\n  hash: stale\n---\n```\nx = 1\n```\n"
        )

        assert note.snippet.hash == "stale"
        assert not note.snippet.is_consistent()

    def test_declared_language_wins(self):
        """Test the header language takes precedence over the fence tag."""
        code = "let a = 1;"
        note = parse_note_markdown(
            "---\nid: n\ntitle: T\nkind: task\nsnippet:\n"
            f"  hash: {compute_snippet_hash(code)}\n  language: typescript\n"
            f"---\n```js\n{code}\n```\n"
        )

        assert note.snippet.language == "typescript"

    def test_declared_snippet_requires_fence(self):
        """Test snippet metadata without a fenced block is rejected."""
        with pytest.raises(MissingSnippetError, match="Snippet metadata declared"):
            parse_note_markdown(
                "---\nid: n\ntitle: T\nkind: task\nsnippet:\n  hash: abc\n---\nNo code here.\n"
            )

    def test_invalid_header_field(self):
        """Test header validation errors propagate."""
        with pytest.raises(FrontmatterValidationError):
            parse_note_markdown("---\nid: n\ntitle: T\nkind: rant\n---\n")


class TestSerializeNote:
    """Tests for serialize_note_markdown."""

    def test_round_trip(self, note_factory):
        """Test a serialized note parses back to the same note."""
        note = note_factory()

        assert parse_note_markdown(serialize_note_markdown(note)) == note

    def test_round_trip_sample(self, sample_note_markdown):
        """Test parsing then serializing then parsing is stable."""
        note = parse_note_markdown(sample_note_markdown)

        assert parse_note_markdown(serialize_note_markdown(note)) == note

    def test_layout(self, note_factory):
        """Test commentary precedes the snippet fence."""
        text = serialize_note_markdown(note_factory(content="Look here."))

        assert text.startswith("---\nid: note-a\n")
        assert text.endswith("---\nLook here.\n\n```ts\nfunction compute(){return 7;}\n```\n")

    def test_snippet_is_authoritative(self, note_factory):
        """Test the header snippet map is taken from the attached snippet."""
        note = note_factory()
        stale = note.model_copy(
            update={"metadata": note.metadata.model_copy(update={"snippet": None})}
        )

        text = serialize_note_markdown(stale)

        assert f"hash: {note.snippet.hash}" in text

    def test_note_without_snippet(self, note_factory):
        """Test a note without a snippet has no snippet header."""
        text = serialize_note_markdown(note_factory(code=None))

        assert "snippet:" not in text
        assert "```" not in text

    def test_rejects_hash_mismatch(self, note_factory):
        """Test a snippet whose hash does not match its code is not written."""
        note = note_factory()
        tampered = note.model_copy(
            update={"snippet": note.snippet.model_copy(update={"code": "return 8;"})}
        )

        with pytest.raises(HashMismatchError) as exc_info:
            serialize_note_markdown(tampered)

        assert exc_info.value.expected_hash == note.snippet.hash
        assert exc_info.value.actual_hash == compute_snippet_hash("return 8;")

    def test_fence_in_content_round_trip(self, note_factory):
        """Test commentary with its own fence keeps the snippet as first fence."""
        note = note_factory(content="See:\n```py\nother()\n```")

        text = serialize_note_markdown(note)
        parsed = parse_note_markdown(text)

        assert "---\n```ts\nfunction compute(){return 7;}\n```\n\nSee:\n" in text
        assert parsed == note
        assert parsed.content == "See:\n```py\nother()\n```"

    def test_two_fence_document_round_trip(self):
        """Test a parsed document with a second fence can be written back."""
        note = parse_note_markdown(
            "---\nid: n\ntitle: T\nkind: task\n---\n"
            "```py\na = 1\n```\n\nSee also:\n\n```sh\nls\n```\n"
        )

        assert note.snippet.code == "a = 1"
        assert note.content == "See also:\n\n```sh\nls\n```"
        assert parse_note_markdown(serialize_note_markdown(note)) == note

    def test_rejects_trailing_whitespace_code(self):
        """Test code that parsing would trim is not written with its old hash."""
        code = "x = 1\n"
        snippet = Snippet(code=code, hash=compute_snippet_hash(code), language="py")
        note = Note(
            metadata=NoteMetadata(id="n", title="T", kind=NoteKind.TASK),
            snippet=snippet,
        )

        with pytest.raises(ValidationError, match="end with whitespace"):
            serialize_note_markdown(note)

    def test_rejects_fence_in_code(self):
        """Test code holding a fence sequence is not truncated on re-read."""
        snippet = Snippet.from_code('doc = """\n```\nexample\n```\n"""', language="py")
        note = Note(
            metadata=NoteMetadata(id="n", title="T", kind=NoteKind.TASK),
            snippet=snippet,
        )

        with pytest.raises(ValidationError, match="fence sequence"):
            serialize_note_markdown(note)

    def test_rejects_invalid_metadata(self):
        """Test metadata is validated before writing."""
        note = Note(metadata=NoteMetadata(id=" ", title="T", kind=NoteKind.TASK))

        with pytest.raises(FrontmatterValidationError):
            serialize_note_markdown(note)

    def test_quotes_special_titles(self):
        """Test titles with separators survive a round trip."""
        snippet = Snippet.from_code("a = 1\n\n", language="py")
        note = Note(
            metadata=NoteMetadata(
                id="n", title="Bug: retries #3", kind=NoteKind.DECISION, snippet=snippet.to_meta()
            ),
            snippet=snippet,
        )

        parsed = parse_note_markdown(serialize_note_markdown(note))

        assert parsed.metadata.title == "Bug: retries #3"
        assert parsed.snippet.code == "a = 1"


class TestChainDocuments:
    """Tests for chain documents."""

    def test_round_trip(self, chain_factory):
        """Test a chain serializes and parses back unchanged."""
        chain = chain_factory(notes=("note-b", "note-a"))

        parsed = parse_chain_markdown(serialize_chain_markdown(chain))

        assert parsed == chain
        assert parsed.metadata.notes == ("note-b", "note-a")

    def test_layout(self, chain_factory):
        """Test header field order."""
        text = serialize_chain_markdown(chain_factory())

        assert text == (
            "---\n"
            "id: chain-a\n"
            "title: Investigation\n"
            "description: Walk through discovery steps.\n"
            "notes:\n"
            "  - note-a\n"
            "tags:\n"
            "  - workflow\n"
            "---\n"
            "Follow up with stakeholders.\n"
        )

    def test_parse_requires_notes(self):
        """Test a chain header without notes is rejected."""
        with pytest.raises(FrontmatterValidationError, match="Chain notes"):
            parse_chain_markdown("---\nid: c\ntitle: T\n---\n")
