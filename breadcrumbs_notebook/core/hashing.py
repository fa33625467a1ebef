"""
Content hashing.

compute_snippet_hash is the snippet integrity token; compute_digest reuses the
same hash over a canonical JSON dump for the index checksum.
"""

import hashlib
import json
from typing import Any


def compute_snippet_hash(source: str) -> str:
    """
    Compute the SHA-256 hash of snippet source.

    No whitespace normalization: the hash is sensitive to the exact bytes.

    Returns:
        64-character lowercase hex digest of the UTF-8 encoded source
    """
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def compute_digest(value: Any) -> str:
    """Hash a JSON-serializable structure (sorted keys, compact separators)."""
    canonical = json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return compute_snippet_hash(canonical)
