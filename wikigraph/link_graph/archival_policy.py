"""Archival decisions for orphaned pages.

A page is archived when no non-protected page links to it and it links to
no non-protected page. The policy only computes which flags must change;
persisting them is up to the caller.
"""

import logging
from typing import Iterable, Optional

from .link_extractor import LinkExtractor
from .models import DEFAULT_PROTECTED_SLUGS, ArchivalDecision, Page
from .reference_graph import ReferenceGraph

logger = logging.getLogger(__name__)


class ArchivalPolicy:
    """Decides which pages to archive or unarchive.

    The decision depends only on the snapshot passed in, so the policy can
    be run as often as desired. Applying a decision and running again on
    the updated snapshot yields an empty decision.

    Example:
        >>> policy = ArchivalPolicy(protected_slugs={"admin", "archive", "hello"})
        >>> decision = policy.compute_archival_set(pages)
        >>> decision.to_archive
        frozenset({'p-3'})
    """

    def __init__(
        self,
        protected_slugs: Iterable[str] = DEFAULT_PROTECTED_SLUGS,
        extractor: Optional[LinkExtractor] = None,
    ):
        """Initialize archival policy.

        Args:
            protected_slugs: Slugs that are never archived
            extractor: LinkExtractor shared with graph construction (optional)
        """
        self.protected_slugs = frozenset(protected_slugs)
        self._extractor = extractor

    def compute_archival_set(self, pages: Iterable[Page]) -> ArchivalDecision:
        """Compute archive/unarchive sets for a page snapshot.

        Args:
            pages: Complete page snapshot

        Returns:
            ArchivalDecision with ids of pages to archive and to unarchive.
            Archived protected pages are unarchived.
        """
        graph = ReferenceGraph.build(
            pages, protected_slugs=self.protected_slugs, extractor=self._extractor
        )
        return self.decide(graph)

    def decide(self, graph: ReferenceGraph) -> ArchivalDecision:
        """Compute the decision from an already built graph."""
        to_archive = set()
        to_unarchive = set()

        for page in graph:
            orphaned = graph.is_orphan(page.id, self.protected_slugs)

            if orphaned and not page.is_archived:
                logger.debug(f"Page {page.id} ({page.slug}) is orphaned, archiving")
                to_archive.add(page.id)
            elif page.is_archived and not orphaned:
                logger.debug(f"Page {page.id} ({page.slug}) is linked again, unarchiving")
                to_unarchive.add(page.id)

        logger.info(
            f"Archival decision: {len(to_archive)} to archive, "
            f"{len(to_unarchive)} to unarchive (of {len(graph)} page(s))"
        )
        return ArchivalDecision(
            to_archive=frozenset(to_archive),
            to_unarchive=frozenset(to_unarchive),
        )
