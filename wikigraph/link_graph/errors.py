"""Typed exception hierarchy for link graph errors.

This module defines all custom exceptions used by the link graph engine.
All exceptions inherit from WikiGraphError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from typing import Optional


class WikiGraphError(Exception):
    """Base exception for all wikigraph errors.

    Use this to catch any application-level error from the wiki engine.
    """
    pass


class LinkGraphError(WikiGraphError):
    """Base exception for all link graph engine errors."""
    pass


class ContentTypeError(LinkGraphError):
    """Raised when page content is neither markup text nor a document tree."""

    def __init__(self, value: object, page_id: Optional[str] = None):
        type_name = type(value).__name__
        if page_id:
            message = (
                f"Unsupported content type '{type_name}' for page {page_id}: "
                f"expected markup string or document tree"
            )
        else:
            message = (
                f"Unsupported content type '{type_name}': "
                f"expected markup string or document tree"
            )
        super().__init__(message)
        self.type_name = type_name
        self.page_id = page_id


class InvalidRewriteError(LinkGraphError):
    """Raised when a rename or delete rewrite request is malformed."""

    def __init__(self, message: str, slug: Optional[str] = None):
        if slug is not None:
            full_message = f"Invalid rewrite for '{slug}': {message}"
        else:
            full_message = f"Invalid rewrite: {message}"
        super().__init__(full_message)
        self.slug = slug
        self.original_message = message


class ProtectedPageError(InvalidRewriteError):
    """Raised when asked to rename or delete a protected page."""

    def __init__(self, slug: str):
        super().__init__("protected pages cannot be renamed or deleted", slug)


class PageNotInGraphError(LinkGraphError):
    """Raised when a page id is not part of the snapshot a graph was built from."""

    def __init__(self, page_id: str):
        super().__init__(f"Page {page_id} is not part of this graph")
        self.page_id = page_id


class DuplicateSlugError(LinkGraphError):
    """Raised when two pages in one snapshot share the same slug."""

    def __init__(self, slug: str, first_id: str, second_id: str):
        super().__init__(
            f"Slug '{slug}' is used by both page {first_id} and page {second_id}"
        )
        self.slug = slug
        self.first_id = first_id
        self.second_id = second_id
