"""Directed page-link graph built from a page snapshot.

The graph is built from a complete list of pages every time it is needed
and never persisted. Only `pageLink` references are graph edges; mentions
and external URLs are kept per page for callers that render them.

Edges point at slugs, not page ids: a page may link to a slug that no page
owns (a dangling reference). Dangling targets are kept as graph members
but `resolve_target` returns None for them and structural queries such as
`linked_pages` skip them.
"""

import logging
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional

from .errors import DuplicateSlugError, LinkGraphError, PageNotInGraphError
from .link_extractor import LinkExtractor
from .models import (
    DEFAULT_PROTECTED_SLUGS,
    EdgeDirection,
    ExtractedReferences,
    GraphEdge,
    GraphNode,
    NodeRelationship,
    Page,
    PageNeighbourhood,
    Reference,
    ReferenceKind,
)

logger = logging.getLogger(__name__)


class ReferenceGraph:
    """In-memory directed graph of page-to-page links.

    The reverse (incoming) index is built in a single pass over all
    pages' outgoing links, so building the graph is O(P·L) for P pages
    with L links each.

    Attributes:
        protected_slugs: Slugs exempt from orphan evaluation by default

    Example:
        >>> graph = ReferenceGraph.build(pages)
        >>> graph.outgoing(page.id)
        frozenset({'other-page'})
        >>> graph.is_orphan(lonely.id)
        True
    """

    def __init__(
        self,
        pages: Iterable[Page],
        protected_slugs: Iterable[str] = DEFAULT_PROTECTED_SLUGS,
        extractor: Optional[LinkExtractor] = None,
    ):
        """Build the graph from a page snapshot.

        Args:
            pages: Complete page snapshot
            protected_slugs: Slugs never treated as archival candidates
            extractor: LinkExtractor to use (a default one if omitted)

        Raises:
            DuplicateSlugError: If two pages share a slug
            LinkGraphError: If two pages share an id
            ContentTypeError: If a page's content is of an unsupported type
        """
        self.protected_slugs: FrozenSet[str] = frozenset(protected_slugs)
        self._extractor = extractor or LinkExtractor()

        self._pages_by_id: Dict[str, Page] = {}
        self._pages_by_slug: Dict[str, Page] = {}
        self._references: Dict[str, ExtractedReferences] = {}
        self._incoming: Dict[str, List[str]] = {}

        for page in pages:
            if page.id in self._pages_by_id:
                raise LinkGraphError(f"Page id {page.id} appears twice in snapshot")
            existing = self._pages_by_slug.get(page.slug)
            if existing is not None:
                raise DuplicateSlugError(page.slug, existing.id, page.id)

            self._pages_by_id[page.id] = page
            self._pages_by_slug[page.slug] = page
            self._references[page.id] = self._extractor.extract_references(page.content)

        # Reverse index: target slug -> ids of pages linking to it
        for page_id, refs in self._references.items():
            source_slug = self._pages_by_id[page_id].slug
            for target in refs.page_links:
                if target == source_slug:
                    continue
                self._incoming.setdefault(target, []).append(page_id)

        logger.debug(
            f"Built reference graph: {len(self._pages_by_id)} page(s), "
            f"{sum(len(r.page_links) for r in self._references.values())} link(s)"
        )

    @classmethod
    def build(
        cls,
        pages: Iterable[Page],
        protected_slugs: Iterable[str] = DEFAULT_PROTECTED_SLUGS,
        extractor: Optional[LinkExtractor] = None,
    ) -> "ReferenceGraph":
        """Build a graph from a page snapshot (see __init__)."""
        return cls(pages, protected_slugs=protected_slugs, extractor=extractor)

    # Snapshot access

    @property
    def pages(self) -> List[Page]:
        """Pages of the snapshot, in snapshot order."""
        return list(self._pages_by_id.values())

    def __len__(self) -> int:
        return len(self._pages_by_id)

    def __contains__(self, page_id: object) -> bool:
        return page_id in self._pages_by_id

    def __iter__(self) -> Iterator[Page]:
        return iter(self._pages_by_id.values())

    def get_page(self, page_id: str) -> Page:
        """Get a page of the snapshot by id.

        Raises:
            PageNotInGraphError: If no page has this id
        """
        try:
            return self._pages_by_id[page_id]
        except KeyError:
            raise PageNotInGraphError(page_id) from None

    def resolve_target(self, slug: str) -> Optional[Page]:
        """Look up the page owning a slug, or None for a dangling slug."""
        return self._pages_by_slug.get(slug)

    # Edge queries

    def references(self, page_id: str) -> ExtractedReferences:
        """All references (links, mentions, URLs) extracted from a page."""
        self.get_page(page_id)
        return self._references[page_id]

    def outgoing(self, page_id: str) -> FrozenSet[str]:
        """Slugs a page links to, including dangling and self targets."""
        return frozenset(self.references(page_id).page_links)

    def incoming(self, page_id: str) -> FrozenSet[str]:
        """Slugs of other pages linking to this page (self-links excluded)."""
        page = self.get_page(page_id)
        return frozenset(
            self._pages_by_id[source_id].slug
            for source_id in self._incoming.get(page.slug, ())
        )

    def referencing_pages(self, slug: str) -> List[Page]:
        """Pages other than the owner of `slug` that link to `slug`."""
        return [self._pages_by_id[page_id] for page_id in self._incoming.get(slug, ())]

    def linked_pages(self, page_id: str) -> List[Page]:
        """Existing pages this page links to, in first-link order.

        Dangling targets and self-links are skipped.
        """
        page = self.get_page(page_id)
        result = []
        for slug in self._references[page_id].page_links:
            target = self._pages_by_slug.get(slug)
            if target is not None and target.id != page.id:
                result.append(target)
        return result

    def edges(self) -> List[Reference]:
        """Every page-link edge, in snapshot and first-seen order."""
        result = []
        for page_id, refs in self._references.items():
            source = self._pages_by_id[page_id].slug
            result.extend(
                ref for ref in refs.references_from(source)
                if ref.kind == ReferenceKind.PAGE_LINK
            )
        return result

    def unresolved_slugs(self) -> List[str]:
        """Link targets no page owns, in first-seen order."""
        seen: Dict[str, None] = {}
        for refs in self._references.values():
            for slug in refs.page_links:
                if slug not in self._pages_by_slug:
                    seen.setdefault(slug, None)
        return list(seen)

    # Orphan detection

    def is_orphan(
        self,
        page_id: str,
        protected_slugs: Optional[Iterable[str]] = None,
    ) -> bool:
        """Check whether a page has no links to or from non-protected pages.

        A protected page is never an orphan. Links to a protected slug and
        links from a protected page do not count, and neither does a page
        linking to itself. A link to a slug no page owns still counts as an
        outgoing link.

        Args:
            page_id: Page to evaluate
            protected_slugs: Overrides the graph's protected slugs

        Returns:
            True if the page is orphaned
        """
        protected = (
            self.protected_slugs if protected_slugs is None else frozenset(protected_slugs)
        )
        page = self.get_page(page_id)
        if page.slug in protected:
            return False

        for target in self._references[page_id].page_links:
            if target != page.slug and target not in protected:
                return False

        for source_id in self._incoming.get(page.slug, ()):
            source = self._pages_by_id[source_id]
            if source.id != page.id and source.slug not in protected:
                return False

        return True

    def orphans(self, protected_slugs: Optional[Iterable[str]] = None) -> List[Page]:
        """All orphaned pages, in snapshot order."""
        protected = None if protected_slugs is None else frozenset(protected_slugs)
        return [page for page in self._pages_by_id.values() if self.is_orphan(page.id, protected)]

    # Visualization

    def neighbourhood(self, slug: str) -> PageNeighbourhood:
        """Nodes and edges directly around one page.

        Outgoing neighbours come first (in link order), then incoming
        neighbours (in snapshot order). A page both linked to and linking
        back appears once, classified as outgoing, with one edge in each
        direction. Only existing pages are included.

        Args:
            slug: Slug of the centre page

        Returns:
            PageNeighbourhood, empty if no page owns `slug`
        """
        current = self._pages_by_slug.get(slug)
        if current is None:
            return PageNeighbourhood()

        nodes: Dict[str, GraphNode] = {
            current.id: GraphNode(current.id, current.slug, current.title, NodeRelationship.CURRENT)
        }
        edges: List[GraphEdge] = []

        for target in self.linked_pages(current.id):
            nodes.setdefault(
                target.id,
                GraphNode(target.id, target.slug, target.title, NodeRelationship.OUTGOING),
            )
            edges.append(GraphEdge(current.id, target.id, EdgeDirection.OUT))

        for source in self.referencing_pages(current.slug):
            nodes.setdefault(
                source.id,
                GraphNode(source.id, source.slug, source.title, NodeRelationship.INCOMING),
            )
            edges.append(GraphEdge(source.id, current.id, EdgeDirection.IN))

        return PageNeighbourhood(nodes=tuple(nodes.values()), edges=tuple(edges))
