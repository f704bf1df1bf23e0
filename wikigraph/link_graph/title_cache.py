"""Display titles for page links.

Rendering a page-link chip needs the target page's current title. The
TitleCache is an explicit object owned by the caller (one per request or
per session) rather than module-level state; callers invalidate entries
when a page is renamed or retitled.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from .link_extractor import LinkExtractor
from .models import Page, ResolvedLink
from .reference_graph import ReferenceGraph

logger = logging.getLogger(__name__)


class TitleCache:
    """Mapping from slug to page title with explicit invalidation.

    Example:
        >>> cache = TitleCache()
        >>> cache.prime(pages)
        >>> cache.get("my-page")
        'My Page'
        >>> cache.invalidate("my-page")
    """

    def __init__(self, titles: Optional[Dict[str, str]] = None):
        self._titles: Dict[str, str] = dict(titles or {})

    def get(self, slug: str) -> Optional[str]:
        """Cached title for a slug, or None."""
        return self._titles.get(slug)

    def put(self, slug: str, title: str) -> None:
        """Cache a title. Empty titles are not cached."""
        if title:
            self._titles[slug] = title

    def invalidate(self, slug: str) -> None:
        """Drop a slug's cached title (after rename, retitle or delete)."""
        if self._titles.pop(slug, None) is not None:
            logger.debug(f"Invalidated cached title for '{slug}'")

    def clear(self) -> None:
        self._titles.clear()

    def prime(self, pages: Iterable[Page]) -> None:
        """Cache the titles of all given pages."""
        for page in pages:
            self.put(page.slug, page.title)

    def __contains__(self, slug: object) -> bool:
        return slug in self._titles

    def __len__(self) -> int:
        return len(self._titles)


def resolve_links(
    content: Any,
    pages: Union[ReferenceGraph, Iterable[Page]],
    cache: Optional[TitleCache] = None,
    extractor: Optional[LinkExtractor] = None,
) -> List[ResolvedLink]:
    """Resolve the page links of some content to display titles.

    For an existing target the title comes from the cache when present,
    else from the page (and is then cached). Slugs no page owns display
    as the raw slug, whatever the cache holds.

    Args:
        content: Content to extract page links from
        pages: Snapshot graph, or a page list to build one from
        cache: TitleCache to read and fill (optional)
        extractor: LinkExtractor to use (optional)

    Returns:
        One ResolvedLink per unique page link, in first-seen order
    """
    extractor = extractor or LinkExtractor()
    graph = pages if isinstance(pages, ReferenceGraph) else ReferenceGraph.build(pages, extractor=extractor)

    resolved = []
    for slug in extractor.extract_references(content).page_links:
        target = graph.resolve_target(slug)
        if target is None:
            resolved.append(ResolvedLink(slug=slug, display_title=slug, exists=False))
            continue

        title = cache.get(slug) if cache is not None else None
        if title is None and target.title:
            title = target.title
            if cache is not None:
                cache.put(slug, title)
        resolved.append(ResolvedLink(slug=slug, display_title=title or slug, exists=True))
    return resolved
