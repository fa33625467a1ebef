"""Snippet conflict outcome models."""

from enum import Enum

from pydantic import BaseModel


class ConflictStatus(str, Enum):
    """Outcome of comparing an expected snippet hash with candidate source."""

    CLEAN = "clean"
    MISSING_SNIPPET = "missing-snippet"
    HASH_MISMATCH = "hash-mismatch"


class ConflictResult(BaseModel):
    """Structured conflict report; expected/actual hashes are kept for diagnostics."""

    model_config = {"frozen": True}

    status: ConflictStatus
    expected_hash: str | None = None
    actual_hash: str | None = None
    message: str | None = None

    @property
    def is_clean(self) -> bool:
        return self.status == ConflictStatus.CLEAN
