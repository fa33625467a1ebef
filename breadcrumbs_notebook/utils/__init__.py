"""Utility modules for the breadcrumbs notebook."""

from breadcrumbs_notebook.utils.exceptions import (
    ConfigurationError,
    FrontmatterError,
    FrontmatterValidationError,
    HashMismatchError,
    IndexFormatError,
    MissingSnippetError,
    NotebookError,
    ValidationError,
)
from breadcrumbs_notebook.utils.logger import get_logger, setup_logging
from breadcrumbs_notebook.utils.text import slugify_id, unique_strings

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # Text helpers
    "slugify_id",
    "unique_strings",
    # Exceptions
    "NotebookError",
    "ValidationError",
    "FrontmatterError",
    "FrontmatterValidationError",
    "HashMismatchError",
    "MissingSnippetError",
    "IndexFormatError",
    "ConfigurationError",
]
