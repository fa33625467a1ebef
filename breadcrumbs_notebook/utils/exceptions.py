"""
Custom exception hierarchy for the breadcrumbs notebook.

Provides structured error types for parsing, validation and integrity checks.
All exceptions inherit from NotebookError for easy catching.

Filesystem errors are not wrapped: anything other than a missing file
propagates as the original OSError.
"""


class NotebookError(Exception):
    """
    Base exception for all notebook errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize notebook error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(NotebookError):
    """
    Validation errors.
    Raised when a document or index fails to parse or validate.
    """

    pass


class FrontmatterError(ValidationError):
    """
    Structural frontmatter errors.
    Raised for a missing header, invalid indentation or an orphaned list item.
    """

    pass


class FrontmatterValidationError(ValidationError):
    """
    Field-level metadata errors.
    Raised when a header field has the wrong type or an invalid value.
    """

    def __init__(self, message: str, field: str, context: dict | None = None):
        super().__init__(message, context={"field": field, **(context or {})})
        self.field = field


class HashMismatchError(ValidationError):
    """
    Snippet integrity errors.
    Raised when a snippet's declared hash does not match its source.
    """

    def __init__(self, expected_hash: str, actual_hash: str):
        super().__init__(
            f"Snippet hash mismatch. Expected {expected_hash} but computed {actual_hash}.",
            context={"expected_hash": expected_hash, "actual_hash": actual_hash},
        )
        self.expected_hash = expected_hash
        self.actual_hash = actual_hash


class MissingSnippetError(ValidationError):
    """
    Raised when snippet metadata is declared but the body has no fenced code block.
    """

    pass


class IndexFormatError(ValidationError):
    """
    Persisted index errors.
    Raised when index.json does not match the expected index shape.
    """

    pass


class ConfigurationError(NotebookError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass
