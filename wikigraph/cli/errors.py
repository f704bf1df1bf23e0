"""Typed exception hierarchy for CLI-related errors.

All exceptions inherit from CLIError and carry the slug or path that
caused them, so commands can report a one-line reason to the user.
"""

from wikigraph.link_graph.errors import WikiGraphError


class CLIError(WikiGraphError):
    """Base exception for all CLI-related errors."""
    pass


class UnknownSlugError(CLIError):
    """Raised when a command names a slug no page in the snapshot owns."""

    def __init__(self, slug: str):
        super().__init__(f"No page with slug '{slug}' in snapshot")
        self.slug = slug


class SlugTakenError(CLIError):
    """Raised when a rename target slug is already used by another page."""

    def __init__(self, slug: str, page_id: str):
        super().__init__(f"Slug '{slug}' is already used by page {page_id}")
        self.slug = slug
        self.page_id = page_id


class InitError(CLIError):
    """Raised when the config file cannot be initialized."""

    def __init__(self, message: str, config_path: str):
        super().__init__(message)
        self.config_path = config_path
