"""Applies engine plans to the page store.

Plans are applied one page write at a time. Each write is retried on
transient errors; a write that still fails is logged and recorded, and
the remaining writes continue. Partially applied plans can simply be
recomputed and applied again, since every entry is idempotent.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple

from wikigraph.link_graph.models import ArchivalDecision, PageInsert, RewriteEntry

from .retry_logic import retry_on_transient_error

logger = logging.getLogger(__name__)


@dataclass
class ApplyResult:
    """Outcome of applying a plan.

    Attributes:
        applied: Page ids (or slugs, for inserts) written successfully
        failed: Page id (or slug) -> error message for failed writes
        dryrun: True if nothing was written
    """
    applied: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    dryrun: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed


class PlanApplier:
    """Writes rewrite plans, archival decisions and stub inserts to a store.

    The store only needs the write methods it is asked to use:
    update_content(page_id, content), set_archived(page_id, flag) and
    insert(page_insert).

    Example:
        >>> applier = PlanApplier(PageStore("pages.yaml"))
        >>> result = applier.apply_rewrites(plan)
        >>> print(f"Updated {len(result.applied)} page(s)")
    """

    def __init__(self, store: object, max_retries: int = 3):
        """Initialize plan applier.

        Args:
            store: Storage collaborator (PageStore or compatible)
            max_retries: Retries per write on transient errors
        """
        self.store = store
        self.max_retries = max_retries
        logger.debug("PlanApplier initialized")

    def apply_rewrites(self, entries: List[RewriteEntry], dryrun: bool = False) -> ApplyResult:
        """Write the updated content of each rewrite entry."""
        return self._apply(
            "content rewrite",
            [(entry.page_id, lambda e=entry: self.store.update_content(e.page_id, e.updated_content))
             for entry in entries],
            dryrun,
        )

    def apply_archival(self, decision: ArchivalDecision, dryrun: bool = False) -> ApplyResult:
        """Write the archived flags of an archival decision."""
        return self._apply(
            "archive flag",
            [(update.page_id, lambda u=update: self.store.set_archived(u.page_id, u.is_archived))
             for update in decision.updates()],
            dryrun,
        )

    def apply_inserts(self, inserts: List[PageInsert], dryrun: bool = False) -> ApplyResult:
        """Create the pages of a stub-page plan (keyed by slug)."""
        return self._apply(
            "page insert",
            [(request.slug, lambda r=request: self.store.insert(r)) for request in inserts],
            dryrun,
        )

    def _apply(
        self,
        label: str,
        writes: List[Tuple[str, Callable[[], object]]],
        dryrun: bool,
    ) -> ApplyResult:
        result = ApplyResult(dryrun=dryrun)

        logger.info(f"Applying {len(writes)} {label}(s) (dryrun={dryrun})")
        if not writes:
            logger.debug(f"No {label}s to apply")
            return result

        for key, write in writes:
            if dryrun:
                logger.info(f"[DRYRUN] Would apply {label}: {key}")
                continue
            try:
                retry_on_transient_error(write, max_retries=self.max_retries)
                result.applied.append(key)
                logger.debug(f"Applied {label}: {key}")
            except Exception as e:
                # Log and continue with remaining writes
                logger.error(f"Failed to apply {label} for {key}: {e}")
                result.failed[key] = str(e)

        if not dryrun:
            logger.info(
                f"{label.capitalize()} complete: {len(result.applied)} applied, "
                f"{len(result.failed)} failed"
            )
        return result
