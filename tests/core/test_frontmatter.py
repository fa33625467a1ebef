"""
Tests for the frontmatter codec.

Tests cover:
1. Splitting header and body
2. Scalars, arrays and nested maps
3. Rejection of ambiguous indentation
4. Serialization rules (omission, quoting, body normalization)
"""

import pytest

from breadcrumbs_notebook.core.frontmatter import (
    ArrayNode,
    MapNode,
    ScalarNode,
    escape_scalar,
    parse_frontmatter_document,
    parse_header,
    parse_scalar,
    serialize_frontmatter_document,
)
from breadcrumbs_notebook.utils.exceptions import FrontmatterError


class TestParseDocument:
    """Tests for splitting a document."""

    def test_splits_header_and_body(self):
        """Test header fields and body are separated at the second marker."""
        parsed = parse_frontmatter_document("---\nid: note-1\ntitle: Hello\n---\nBody text\n")

        assert parsed.values() == {"id": "note-1", "title": "Hello"}
        assert parsed.body == "Body text\n"

    def test_ignores_leading_whitespace(self):
        """Test whitespace before the opening marker is skipped."""
        parsed = parse_frontmatter_document("\n\n  ---\nid: x\n---\n")

        assert parsed.values() == {"id": "x"}
        assert parsed.body == ""

    def test_empty_header(self):
        """Test a header with no fields parses to an empty map."""
        parsed = parse_frontmatter_document("---\n---\ntext")

        assert parsed.data == MapNode({})
        assert parsed.body == "text"

    def test_crlf_line_endings(self):
        """Test Windows line endings are accepted."""
        parsed = parse_frontmatter_document("---\r\nid: x\r\n---\r\nbody\r\n")

        assert parsed.values() == {"id": "x"}
        assert parsed.body == "body\r\n"

    def test_missing_header(self):
        """Test a document without markers is rejected."""
        with pytest.raises(FrontmatterError, match="missing YAML frontmatter"):
            parse_frontmatter_document("id: x\n")

    def test_unterminated_header(self):
        """Test a header without a closing marker is rejected."""
        with pytest.raises(FrontmatterError, match="not closed"):
            parse_frontmatter_document("---\nid: x\nbody")


class TestParseHeader:
    """Tests for the header grammar."""

    def test_scalar_array_and_map(self):
        """Test the three value shapes parse into tagged nodes."""
        node = parse_header(
            "title: Inspect\n"
            "tags:\n"
            "  - logs\n"
            "  - 'alerts'\n"
            "snippet:\n"
            "  hash: abc\n"
            "  language: ts\n"
        )

        assert node.entries["title"] == ScalarNode("Inspect")
        assert node.entries["tags"] == ArrayNode(("logs", "alerts"))
        assert node.entries["snippet"] == MapNode(
            {"hash": ScalarNode("abc"), "language": ScalarNode("ts")}
        )

    def test_dedent_returns_to_parent(self):
        """Test a key after a nested map belongs to the outer map."""
        node = parse_header("snippet:\n  hash: abc\nkind: task\n")

        assert node.to_python() == {"snippet": {"hash": "abc"}, "kind": "task"}

    def test_deeper_nesting(self):
        """Test maps nest more than one level."""
        node = parse_header("a:\n  b:\n    c: d\n    e:\n      - f\n  g: h\n")

        assert node.to_python() == {"a": {"b": {"c": "d", "e": ["f"]}, "g": "h"}}

    def test_key_without_value_is_empty_scalar(self):
        """Test `key:` with nothing nested is an empty scalar."""
        node = parse_header("description:\ntitle: x\n")

        assert node.entries["description"] == ScalarNode("")

    def test_blank_lines_are_ignored(self):
        """Test blank lines between entries do not affect parsing."""
        node = parse_header("tags:\n\n  - a\n\n  - b\n\nid: x\n")

        assert node.to_python() == {"tags": ["a", "b"], "id": "x"}

    def test_value_with_colon(self):
        """Test only the first colon separates key from value."""
        node = parse_header("createdAt: 2024-01-01T10:00:00Z\n")

        assert node.to_python() == {"createdAt": "2024-01-01T10:00:00Z"}

    def test_rejects_over_indented_nested_map(self):
        """Test a nested map indented by more than two spaces is rejected."""
        with pytest.raises(FrontmatterError, match="Invalid indentation"):
            parse_header("snippet:\n    hash: abc\n")

    def test_rejects_odd_indentation(self):
        """Test a one-space indentation increase is rejected."""
        with pytest.raises(FrontmatterError, match="Invalid indentation"):
            parse_header("snippet:\n hash: abc\n")

    def test_rejects_over_indented_list_item(self):
        """Test list items must sit exactly two spaces under their key."""
        with pytest.raises(FrontmatterError, match="Invalid indentation"):
            parse_header("tags:\n    - a\n")

    def test_rejects_orphan_list_item(self):
        """Test a list item without an owning key is rejected."""
        with pytest.raises(FrontmatterError, match="associated with a key"):
            parse_header("- stray\n")

    def test_rejects_unindented_list_item(self):
        """Test a list item at the key's own level has no owner."""
        with pytest.raises(FrontmatterError, match="associated with a key"):
            parse_header("tags:\n- a\n")

    def test_rejects_line_without_separator(self):
        """Test a line with no colon is rejected."""
        with pytest.raises(FrontmatterError, match="Unable to parse"):
            parse_header("just words\n")

    def test_rejects_indented_first_line(self):
        """Test the header cannot start indented."""
        with pytest.raises(FrontmatterError, match="Invalid indentation"):
            parse_header("  id: x\n")


class TestScalars:
    """Tests for scalar quoting."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("plain", "plain"),
            ("  padded  ", "padded"),
            ('"double"', "double"),
            ("'single'", "single"),
            ("'mismatched\"", "'mismatched\""),
            ('"', '"'),
            ('"say \\"hi\\""', 'say "hi"'),
        ],
    )
    def test_parse_scalar(self, raw, expected):
        """Test quotes are stripped only when they match."""
        assert parse_scalar(raw) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("plain", "plain"),
            ("a: b", '"a: b"'),
            ("issue #4", '"issue #4"'),
            ('say "hi"', '"say \\"hi\\""'),
            ("it's", '"it\'s"'),
            ("a - b", '"a - b"'),
            ("", '""'),
        ],
    )
    def test_escape_scalar(self, value, expected):
        """Test scalars with special characters are double quoted."""
        assert escape_scalar(value) == expected

    def test_escape_rejects_multiline(self):
        """Test multi-line scalars cannot be written."""
        with pytest.raises(FrontmatterError):
            escape_scalar("line one\nline two")


class TestSerialize:
    """Tests for serialization."""

    def test_serializes_fields_in_order(self):
        """Test scalars, arrays and maps are written in the given order."""
        text = serialize_frontmatter_document(
            {"id": "n", "tags": ["a", "b"], "snippet": {"hash": "h", "language": "py"}},
            "Body",
        )

        assert text == (
            "---\n"
            "id: n\n"
            "tags:\n"
            "  - a\n"
            "  - b\n"
            "snippet:\n"
            "  hash: h\n"
            "  language: py\n"
            "---\n"
            "Body\n"
        )

    def test_omits_empty_and_missing_values(self):
        """Test None, empty arrays and empty maps are omitted."""
        text = serialize_frontmatter_document(
            {"id": "n", "tags": [], "links": (), "snippet": {"hash": None}, "createdAt": None},
            "",
        )

        assert text == "---\nid: n\n---\n"

    def test_normalizes_body(self):
        """Test leading blank lines and trailing whitespace are stripped."""
        text = serialize_frontmatter_document({"id": "n"}, "\n\n   \n  indented\ntext  \n\n\n")

        assert text.endswith("---\n  indented\ntext\n")

    def test_round_trip_with_special_characters(self):
        """Test quoted values survive a serialize/parse round trip."""
        data = {
            "title": 'Fix: "quoted" #1 - it\'s done',
            "path": "C:\\temp\\x",
            "tags": ["a: b", "- c"],
            "empty": "",
        }

        parsed = parse_frontmatter_document(serialize_frontmatter_document(data, "body"))

        assert parsed.values() == data
        assert parsed.body == "body\n"

    def test_accepts_tagged_nodes(self):
        """Test parsed nodes can be serialized back directly."""
        node = parse_header("id: x\ntags:\n  - a\n")

        text = serialize_frontmatter_document(node.entries, "")

        assert text == "---\nid: x\ntags:\n  - a\n---\n"
