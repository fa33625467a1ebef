"""
Frontmatter codec.

Splits a markdown document into a metadata header delimited by `---` lines
and a free-text body, and serializes the pair back.

The header is a restricted YAML subset:

    key: scalar
    key:
      - array item
    key:
      nested: value

Parsing is recursive descent over lines with an indentation level; every
nesting step is exactly two spaces. Parsed values are tagged nodes
(ScalarNode, ArrayNode, MapNode) so callers can tell an empty scalar from an
empty array. Anything ambiguous raises FrontmatterError instead of being
guessed.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from breadcrumbs_notebook.utils.exceptions import FrontmatterError

MARKER = "---"
INDENT_STEP = 2

_LEADING_BLANK_LINES = re.compile(r"^\s*\n")
_ESCAPED_CHAR = re.compile(r'\\(["\\])')
_QUOTE_TRIGGERS = (":", "#", '"', "'", "- ")


@dataclass(frozen=True)
class ScalarNode:
    """Single string value."""

    value: str

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class ArrayNode:
    """Array of scalars."""

    items: tuple[str, ...] = ()

    def to_python(self) -> list[str]:
        return list(self.items)


@dataclass(frozen=True)
class MapNode:
    """Ordered key/value map; values are nested nodes."""

    entries: dict[str, "FrontmatterNode"] = field(default_factory=dict)

    def to_python(self) -> dict[str, Any]:
        return {key: node.to_python() for key, node in self.entries.items()}


FrontmatterNode = Union[ScalarNode, ArrayNode, MapNode]


@dataclass(frozen=True)
class ParsedFrontmatter:
    """Result of splitting a document into header data and body."""

    data: MapNode
    body: str

    def values(self) -> dict[str, Any]:
        """Plain dict/list/str projection of the header."""
        return self.data.to_python()


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def _is_list_item(text: str) -> bool:
    return text == "-" or text.startswith("- ")


def parse_scalar(raw: str) -> str:
    """Trim a scalar and strip one pair of matching quotes."""
    trimmed = raw.strip()
    if len(trimmed) >= 2 and trimmed[0] == trimmed[-1] and trimmed[0] in "\"'":
        inner = trimmed[1:-1]
        if trimmed[0] == '"':
            inner = _ESCAPED_CHAR.sub(r"\1", inner)
        return inner
    return trimmed


class _HeaderParser:
    """Recursive-descent parser over header lines."""

    def __init__(self, source: str):
        self.lines = source.splitlines()
        self.pos = 0

    def _peek(self) -> str | None:
        """Next non-blank line without consuming it."""
        while self.pos < len(self.lines) and not self.lines[self.pos].strip():
            self.pos += 1
        if self.pos >= len(self.lines):
            return None
        return self.lines[self.pos]

    def parse(self) -> MapNode:
        return self._parse_map(0)

    def _parse_map(self, indent: int) -> MapNode:
        entries: dict[str, FrontmatterNode] = {}
        while (line := self._peek()) is not None:
            current = _indent_of(line)
            if current < indent:
                break
            if current > indent:
                raise FrontmatterError(
                    "Invalid indentation detected in frontmatter.",
                    context={"line": self.pos + 1, "expected": indent, "found": current},
                )
            text = line.strip()
            if _is_list_item(text):
                raise FrontmatterError(
                    "List items must be associated with a key.",
                    context={"line": self.pos + 1},
                )
            key, separator, remainder = text.partition(":")
            key = key.strip()
            if not separator or not key:
                raise FrontmatterError(
                    f'Unable to parse frontmatter line: "{text}".',
                    context={"line": self.pos + 1},
                )
            self.pos += 1

            if remainder.strip():
                entries[key] = ScalarNode(parse_scalar(remainder))
                continue

            following = self._peek()
            if following is not None and _is_list_item(following.strip()):
                entries[key] = self._parse_array(indent + INDENT_STEP)
            elif following is not None and _indent_of(following) > indent:
                entries[key] = self._parse_map(indent + INDENT_STEP)
            else:
                entries[key] = ScalarNode("")
        return MapNode(entries)

    def _parse_array(self, indent: int) -> ArrayNode:
        # Items at any other indent end the array; the enclosing map then
        # rejects them as a bad indent or an orphaned list item.
        items: list[str] = []
        while (line := self._peek()) is not None:
            text = line.strip()
            if _indent_of(line) != indent or not _is_list_item(text):
                break
            items.append(parse_scalar(text[1:]))
            self.pos += 1
        return ArrayNode(tuple(items))


def parse_header(source: str) -> MapNode:
    """Parse header text (without the `---` markers) into a MapNode."""
    return _HeaderParser(source).parse()


def parse_frontmatter_document(raw: str) -> ParsedFrontmatter:
    """
    Split a markdown document into frontmatter data and body content.

    Leading whitespace before the opening marker is ignored. The body is
    everything after the closing marker line, unmodified.

    Raises:
        FrontmatterError: If the markers are missing or the header is malformed
    """
    lines = raw.lstrip().splitlines(keepends=True)
    if not lines or lines[0].rstrip("\r\n") != MARKER:
        raise FrontmatterError("Markdown document is missing YAML frontmatter.")
    for position in range(1, len(lines)):
        if lines[position].rstrip("\r\n") == MARKER:
            header = "".join(lines[1:position])
            body = "".join(lines[position + 1 :])
            return ParsedFrontmatter(data=parse_header(header), body=body)
    raise FrontmatterError("Markdown document frontmatter is not closed by a '---' line.")


def escape_scalar(value: str) -> str:
    """Double-quote a scalar when it would not survive an unquoted round trip."""
    if "\n" in value or "\r" in value:
        raise FrontmatterError("Frontmatter values must fit on a single line.", context={"value": value})
    needs_quotes = (
        value == ""
        or value != value.strip()
        or any(trigger in value for trigger in _QUOTE_TRIGGERS)
    )
    if not needs_quotes:
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _scalar_text(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    return escape_scalar(str(value))


def _stringify_entries(data: Mapping[str, Any], indent: int = 0) -> list[str]:
    lines: list[str] = []
    padding = " " * indent
    for key, raw in data.items():
        if raw is None:
            continue
        if isinstance(raw, (ScalarNode, ArrayNode, MapNode)):
            raw = raw.to_python()
        if isinstance(raw, (list, tuple)):
            if not raw:
                continue
            lines.append(f"{padding}{key}:")
            item_padding = " " * (indent + INDENT_STEP)
            lines.extend(f"{item_padding}- {_scalar_text(item)}" for item in raw)
            continue
        if isinstance(raw, Mapping):
            nested = _stringify_entries(raw, indent + INDENT_STEP)
            if not nested:
                continue
            lines.append(f"{padding}{key}:")
            lines.extend(nested)
            continue
        lines.append(f"{padding}{key}: {_scalar_text(raw)}")
    return lines


def normalize_body(body: str) -> str:
    """Strip leading blank lines and trailing whitespace; one trailing newline if non-empty."""
    normalized = _LEADING_BLANK_LINES.sub("", body, count=1).rstrip()
    return f"{normalized}\n" if normalized else ""


def serialize_frontmatter_document(data: Mapping[str, Any], body: str) -> str:
    """
    Compose a markdown document from header fields and body content.

    The header is regenerated from `data` alone: None values, empty arrays and
    empty nested maps are omitted.
    """
    header_lines = _stringify_entries(data)
    header = "".join(f"{line}\n" for line in header_lines)
    return f"{MARKER}\n{header}{MARKER}\n{normalize_body(body)}"
