"""
String helpers shared by the codec, validators and store.

- unique_strings: trim, drop empties, de-duplicate by first occurrence
- slugify_id: filesystem-friendly file stem for a note or chain id
"""

import re
from collections.abc import Iterable

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def unique_strings(values: Iterable[str] | None) -> list[str]:
    """
    Normalize strings by trimming whitespace and removing duplicates.

    Order of first occurrence is preserved; entries that are empty after
    trimming are dropped.

    Args:
        values: Strings to normalize (None is treated as empty)

    Returns:
        Normalized list
    """
    if not values:
        return []
    seen: set[str] = set()
    normalized: list[str] = []
    for value in values:
        trimmed = value.strip()
        if not trimmed or trimmed in seen:
            continue
        seen.add(trimmed)
        normalized.append(trimmed)
    return normalized


def slugify_id(identifier: str) -> str:
    """
    Convert an identifier into a lowercase, filesystem-friendly slug.

    Runs of non-alphanumeric characters collapse to a single hyphen and
    leading/trailing hyphens are stripped: "Note A/1" -> "note-a-1".
    """
    slug = _NON_ALPHANUMERIC.sub("-", identifier.lower().strip())
    return slug.strip("-")
