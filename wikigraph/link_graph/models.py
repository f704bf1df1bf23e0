"""Data models for the link graph engine.

This module defines the page snapshot entity, the tagged content union
(markup text or document tree), and the result types produced by the
engine's components: extracted references, archival decisions, rewrite
plans, stub-page inserts and resolved link titles.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, List, Optional, Tuple, Union

from .doc_models import DocDocument
from .doc_parser import DocParser, is_document
from .errors import ContentTypeError

# Slugs never evaluated for archival
DEFAULT_PROTECTED_SLUGS: FrozenSet[str] = frozenset({"admin", "archive", "hello"})


@dataclass(frozen=True)
class MarkupContent:
    """Plain string content with inline `[slug]` and `@handle` tokens.

    Attributes:
        text: Raw content string (may contain HTML markup)
    """

    text: str = ""

    kind = "markup"


@dataclass(frozen=True)
class TreeContent:
    """Structured document tree content.

    Attributes:
        root: Parsed document
    """

    root: DocDocument

    kind = "tree"


PageContent = Union[MarkupContent, TreeContent]


def content_from_raw(value: Any, page_id: Optional[str] = None) -> PageContent:
    """Convert a storage value into the tagged content union.

    Args:
        value: Raw content as stored (string, document dict, None, or
            an already-tagged content object)
        page_id: Page the content belongs to (for error messages)

    Returns:
        MarkupContent or TreeContent

    Raises:
        ContentTypeError: If the value is neither markup nor a document
    """
    if value is None:
        return MarkupContent("")
    if isinstance(value, (MarkupContent, TreeContent)):
        return value
    if isinstance(value, str):
        return MarkupContent(value)
    if is_document(value):
        return TreeContent(DocParser().parse_document(value))
    raise ContentTypeError(value, page_id)


def content_to_raw(content: PageContent) -> Union[str, dict]:
    """Convert tagged content back to its storage value."""
    if isinstance(content, TreeContent):
        return content.root.to_dict()
    return content.text


@dataclass
class Page:
    """A wiki page as supplied by the storage collaborator.

    Attributes:
        id: Opaque unique identifier, immutable once created
        slug: URL-safe unique key used for linking (mutable via rename)
        title: Display title
        content: Markup or document tree content
        is_archived: Archived flag maintained by ArchivalPolicy
        created_at: Creation timestamp as stored (not interpreted)
        updated_at: Last update timestamp as stored (not interpreted)
    """

    id: str
    slug: str
    title: str = ""
    content: PageContent = field(default_factory=MarkupContent)
    is_archived: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def __post_init__(self):
        self.content = content_from_raw(self.content, self.id)


class ReferenceKind(Enum):
    """Kinds of references found in page content."""

    PAGE_LINK = "pageLink"
    MENTION = "mention"
    EXTERNAL_URL = "externalUrl"


@dataclass(frozen=True)
class Reference:
    """A directed reference from one page to a target.

    Only PAGE_LINK references participate in the page graph.

    Attributes:
        source: Slug of the referencing page
        target: Target slug, handle or URL
        kind: Reference kind
    """

    source: str
    target: str
    kind: ReferenceKind


@dataclass(frozen=True)
class ExtractedReferences:
    """References extracted from one piece of content.

    Each field is de-duplicated and keeps first-seen order.

    Attributes:
        page_links: Target slugs of `[slug]` tokens and pageLink nodes
        mentions: Handles of `@handle` tokens and mention nodes
        external_urls: http(s) URLs found in text or link marks
    """

    page_links: Tuple[str, ...] = ()
    mentions: Tuple[str, ...] = ()
    external_urls: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when no reference of any kind was found."""
        return not (self.page_links or self.mentions or self.external_urls)

    def references_from(self, source: str) -> List[Reference]:
        """Expand into Reference edges originating at `source`."""
        refs = [Reference(source, slug, ReferenceKind.PAGE_LINK) for slug in self.page_links]
        refs.extend(Reference(source, handle, ReferenceKind.MENTION) for handle in self.mentions)
        refs.extend(Reference(source, url, ReferenceKind.EXTERNAL_URL) for url in self.external_urls)
        return refs


class RewriteMode(Enum):
    """What happened to the page whose incoming links are rewritten."""

    RENAME = "rename"
    DELETE = "delete"


@dataclass(frozen=True)
class RewriteEntry:
    """One pending content write produced by ReferenceRewriter.

    Attributes:
        page_id: Page to update
        updated_content: Full replacement content, same shape as the input
    """

    page_id: str
    updated_content: PageContent


@dataclass(frozen=True)
class ArchiveUpdate:
    """One pending archived-flag write."""

    page_id: str
    is_archived: bool


@dataclass(frozen=True)
class ArchivalDecision:
    """Result of ArchivalPolicy.compute_archival_set.

    Attributes:
        to_archive: Ids of pages that became orphaned and are not archived
        to_unarchive: Ids of archived pages that are no longer orphaned
    """

    to_archive: FrozenSet[str] = frozenset()
    to_unarchive: FrozenSet[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        """True when nothing needs to change."""
        return not self.to_archive and not self.to_unarchive

    def updates(self) -> List[ArchiveUpdate]:
        """Flatten the decision into flag updates, ordered by page id."""
        result = [ArchiveUpdate(page_id, True) for page_id in sorted(self.to_archive)]
        result.extend(ArchiveUpdate(page_id, False) for page_id in sorted(self.to_unarchive))
        return result


@dataclass(frozen=True)
class PageInsert:
    """Request to create a page for an unresolved link target."""

    slug: str
    title: str
    content: str


@dataclass(frozen=True)
class ResolvedLink:
    """A page link with the title to display for it.

    Attributes:
        slug: Target slug as written in content
        display_title: Target page title, or the raw slug if unresolved
        exists: Whether the target page exists
    """

    slug: str
    display_title: str
    exists: bool


class NodeRelationship(Enum):
    """How a neighbourhood node relates to the page at its centre."""

    CURRENT = "current"
    OUTGOING = "outgoing"
    INCOMING = "incoming"


class EdgeDirection(Enum):
    """Direction of a neighbourhood edge relative to the centre page."""

    OUT = "out"
    IN = "in"


@dataclass(frozen=True)
class GraphNode:
    """A page in a neighbourhood view."""

    id: str
    slug: str
    title: str
    relationship: NodeRelationship

    @property
    def is_current(self) -> bool:
        return self.relationship == NodeRelationship.CURRENT


@dataclass(frozen=True)
class GraphEdge:
    """A page-link edge in a neighbourhood view (by page id)."""

    source: str
    target: str
    direction: EdgeDirection


@dataclass(frozen=True)
class PageNeighbourhood:
    """Pages directly linked to or from one page, for visualization."""

    nodes: Tuple[GraphNode, ...] = ()
    edges: Tuple[GraphEdge, ...] = ()
