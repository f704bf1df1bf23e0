"""Typed exception hierarchy for page store errors.

All exceptions inherit from StoreError, itself a WikiGraphError, and
include the snapshot path or page id involved.
"""

from typing import Optional

from wikigraph.link_graph.errors import WikiGraphError


class StoreError(WikiGraphError):
    """Base exception for all page store errors."""
    pass


class SnapshotFilesystemError(StoreError):
    """Raised when the snapshot file cannot be read or written."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Snapshot operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class SnapshotFormatError(StoreError):
    """Raised when the snapshot file does not hold a valid page list."""

    def __init__(self, file_path: str, message: str):
        super().__init__(f"Invalid snapshot {file_path}: {message}")
        self.file_path = file_path
        self.message = message


class PageNotFoundError(StoreError):
    """Raised when a requested page does not exist in the store."""

    def __init__(self, page_id: str):
        super().__init__(f"Page {page_id} not found")
        self.page_id = page_id


class SlugConflictError(StoreError):
    """Raised when a slug is already used by another page."""

    def __init__(self, slug: str, page_id: str):
        super().__init__(f"Slug '{slug}' is already used by page {page_id}")
        self.slug = slug
        self.page_id = page_id


class TransientStoreError(StoreError):
    """Raised by storage backends for failures that may succeed on retry."""
    pass


class RetryExhaustedError(StoreError):
    """Raised when a page write keeps failing after all retries."""

    def __init__(self, retries: int, reason: Optional[str] = None):
        message = f"Page write failed after {retries} retries"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.retries = retries
        self.reason = reason
