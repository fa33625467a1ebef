"""
Snippet conflict detection.

Compares the hash recorded in a note's metadata with snippet source found
elsewhere (for example an externally edited file) without touching storage.
"""

from breadcrumbs_notebook.core.hashing import compute_snippet_hash
from breadcrumbs_notebook.models.conflict import ConflictResult, ConflictStatus


def detect_snippet_conflict(
    expected_hash: str | None, candidate_snippet: str | None
) -> ConflictResult:
    """
    Compare an expected snippet hash with candidate source.

    Args:
        expected_hash: Hash recorded in note metadata, if any
        candidate_snippet: Source to check; blank counts as missing

    Returns:
        CLEAN when there is no expectation or the hashes agree,
        MISSING_SNIPPET when a hash is expected but no source was given,
        HASH_MISMATCH otherwise. Never raises.
    """
    if not candidate_snippet or not candidate_snippet.strip():
        if not expected_hash:
            return ConflictResult(status=ConflictStatus.CLEAN)
        return ConflictResult(
            status=ConflictStatus.MISSING_SNIPPET,
            expected_hash=expected_hash,
            message="Snippet content is missing while an expected hash was provided.",
        )

    actual_hash = compute_snippet_hash(candidate_snippet)
    if not expected_hash or expected_hash == actual_hash:
        return ConflictResult(
            status=ConflictStatus.CLEAN, expected_hash=expected_hash or None, actual_hash=actual_hash
        )
    return ConflictResult(
        status=ConflictStatus.HASH_MISMATCH,
        expected_hash=expected_hash,
        actual_hash=actual_hash,
        message="Snippet hash mismatch detected.",
    )
