"""Wiki-link graph engine.

This package extracts page links from page content, builds the directed
graph of page-to-page links from a page snapshot, decides which orphaned
pages to archive, and plans the content rewrites that keep links valid
when pages are renamed or deleted. Every operation is a pure function of
the snapshot it is given; persisting results is the caller's job.

Key classes:
    LinkExtractor: Extracts page links, mentions and URLs from content
    ReferenceGraph: Directed page-link graph with orphan detection
    ArchivalPolicy: Computes archive/unarchive decisions
    ReferenceRewriter: Plans link rewrites for renamed or deleted pages
    TitleCache: Caller-owned slug -> title cache for link rendering
    LinkRenderer: Renders link tokens as anchors
    DocParser: Parses structured document trees
"""

from .models import (
    DEFAULT_PROTECTED_SLUGS,
    ArchivalDecision,
    ArchiveUpdate,
    EdgeDirection,
    ExtractedReferences,
    GraphEdge,
    GraphNode,
    MarkupContent,
    NodeRelationship,
    Page,
    PageContent,
    PageInsert,
    PageNeighbourhood,
    Reference,
    ReferenceKind,
    ResolvedLink,
    RewriteEntry,
    RewriteMode,
    TreeContent,
    content_from_raw,
    content_to_raw,
)
from .doc_models import DocDocument, DocMark, DocNode, DocNodeType
from .doc_parser import DocParser
from .errors import (
    WikiGraphError,
    LinkGraphError,
    ContentTypeError,
    InvalidRewriteError,
    ProtectedPageError,
    PageNotInGraphError,
    DuplicateSlugError,
)
from .link_extractor import LinkExtractor, extract_references, iter_page_link_tokens
from .reference_graph import ReferenceGraph
from .archival_policy import ArchivalPolicy
from .reference_rewriter import ReferenceRewriter
from .stub_pages import plan_stub_pages, stub_page_for
from .title_cache import TitleCache, resolve_links
from .renderer import LinkRenderer, render_markup
from .slugs import SlugConverter

__all__ = [
    # Core components
    "LinkExtractor",
    "ReferenceGraph",
    "ArchivalPolicy",
    "ReferenceRewriter",
    "TitleCache",
    "LinkRenderer",
    "DocParser",
    "SlugConverter",
    # Functions
    "extract_references",
    "iter_page_link_tokens",
    "plan_stub_pages",
    "stub_page_for",
    "resolve_links",
    "render_markup",
    "content_from_raw",
    "content_to_raw",
    # Data models
    "DEFAULT_PROTECTED_SLUGS",
    "Page",
    "PageContent",
    "MarkupContent",
    "TreeContent",
    "Reference",
    "ReferenceKind",
    "ExtractedReferences",
    "RewriteMode",
    "RewriteEntry",
    "ArchivalDecision",
    "ArchiveUpdate",
    "PageInsert",
    "ResolvedLink",
    "GraphNode",
    "GraphEdge",
    "NodeRelationship",
    "EdgeDirection",
    "PageNeighbourhood",
    # Document models
    "DocDocument",
    "DocNode",
    "DocMark",
    "DocNodeType",
    # Errors
    "WikiGraphError",
    "LinkGraphError",
    "ContentTypeError",
    "InvalidRewriteError",
    "ProtectedPageError",
    "PageNotInGraphError",
    "DuplicateSlugError",
]
