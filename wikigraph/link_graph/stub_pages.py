"""Stub pages for link targets that no page owns yet."""

import logging
from typing import Iterable, List, Optional

from .link_extractor import LinkExtractor
from .models import Page, PageInsert
from .reference_graph import ReferenceGraph
from .slugs import SlugConverter

logger = logging.getLogger(__name__)

STUB_BODY = "This page was automatically created to resolve a broken link."


def stub_page_for(slug: str) -> PageInsert:
    """Build the insert request for a page created from a link target.

    Example:
        >>> stub_page_for("my-new-page").title
        'My New Page'
    """
    title = SlugConverter.title_from_slug(slug)
    return PageInsert(
        slug=slug,
        title=title,
        content=f"<h1>{title}</h1>\n<p>{STUB_BODY}</p>",
    )


def plan_stub_pages(
    pages: Iterable[Page],
    extractor: Optional[LinkExtractor] = None,
) -> List[PageInsert]:
    """Plan one page insert per unresolved link target.

    Args:
        pages: Complete page snapshot
        extractor: LinkExtractor to use (optional)

    Returns:
        PageInsert list in first-seen order of the unresolved slugs
    """
    graph = ReferenceGraph.build(pages, extractor=extractor)
    inserts = [stub_page_for(slug) for slug in graph.unresolved_slugs()]
    logger.info(f"Found {len(inserts)} unresolved link target(s)")
    return inserts
