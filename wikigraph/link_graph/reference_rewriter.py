"""Rewrite plans that keep page links valid after a rename or delete.

When a page is renamed, every `[old-slug]` token in other pages becomes
`[new-slug]`. When a page is deleted, every `[slug]` token degrades to
inert text: the slug with hyphens turned into spaces.

The rewriter returns a plan (one entry per page whose content changes)
instead of writing anything. Applying a plan is idempotent: once a page
has been rewritten the token no longer matches, so planning again yields
no entry for it.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

from .doc_models import DocDocument, DocNode, DocNodeType
from .doc_parser import DocParser
from .errors import InvalidRewriteError, ProtectedPageError
from .models import (
    DEFAULT_PROTECTED_SLUGS,
    MarkupContent,
    Page,
    PageContent,
    RewriteEntry,
    RewriteMode,
    TreeContent,
)
from .slugs import SlugConverter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Substitution:
    """One slug rewrite: which token to find and what it becomes."""

    slug: str
    mode: RewriteMode
    new_slug: Optional[str]
    # None when the slug cannot appear in a bracket token
    pattern: Optional[Pattern[str]]

    @property
    def markup_replacement(self) -> str:
        if self.mode == RewriteMode.RENAME:
            return f"[{self.new_slug}]"
        return SlugConverter.plain_text_from_slug(self.slug)


def _substitution(slug: str, mode: RewriteMode, new_slug: Optional[str]) -> _Substitution:
    pattern = None
    if "]" not in slug:
        # Slugs may contain regex metacharacters; match them literally
        pattern = re.compile(re.escape(f"[{slug}]"))
    return _Substitution(slug=slug, mode=mode, new_slug=new_slug, pattern=pattern)


class ReferenceRewriter:
    """Plans content updates for pages referencing a renamed or deleted page.

    The affected page's own content is never part of a plan: a page that
    links to itself keeps that link as written. Protected pages cannot be
    renamed or deleted.

    Slugs containing `]` only occur in document-tree `pageLink` nodes, so
    they are rewritten there and never matched in markup text. Renaming to
    such a slug fails if a markup token would have to carry it.

    Example:
        >>> rewriter = ReferenceRewriter(protected_slugs=["hello"])
        >>> plan = rewriter.plan_rewrite("old-slug", RewriteMode.RENAME, pages, new_slug="new-slug")
        >>> plan[0].updated_content.text
        'see [new-slug] here'
    """

    def __init__(self, protected_slugs: Optional[Iterable[str]] = None):
        """Initialize the rewriter.

        Args:
            protected_slugs: Slugs that may not be renamed or deleted
                (defaults to DEFAULT_PROTECTED_SLUGS)
        """
        if protected_slugs is None:
            protected_slugs = DEFAULT_PROTECTED_SLUGS
        self.protected_slugs = frozenset(protected_slugs)

    def plan_rewrite(
        self,
        affected_slug: str,
        mode: RewriteMode,
        pages: Iterable[Page],
        new_slug: Optional[str] = None,
    ) -> List[RewriteEntry]:
        """Plan rewrites for a rename or delete of one page.

        Args:
            affected_slug: Slug of the page being renamed or deleted
            mode: RewriteMode.RENAME or RewriteMode.DELETE (or their values)
            pages: Complete page snapshot
            new_slug: New slug (required for rename)

        Returns:
            List of RewriteEntry, one per page whose content changes, in
            snapshot order

        Raises:
            InvalidRewriteError: If the request is malformed
            ProtectedPageError: If affected_slug is protected
        """
        mode = self._validate(affected_slug, mode, new_slug)
        self._check_unprotected(affected_slug)
        substitution = _substitution(affected_slug, mode, new_slug)

        # After a rename the caller may already hold the renamed page
        excluded = {affected_slug}
        if mode == RewriteMode.RENAME:
            excluded.add(new_slug)

        plan = self._plan(pages, [substitution], excluded)
        logger.info(
            f"Planned {mode.value} of '{affected_slug}': "
            f"{len(plan)} referencing page(s) to update"
        )
        return plan

    def plan_bulk_delete(
        self,
        slugs: Sequence[str],
        pages: Iterable[Page],
    ) -> List[RewriteEntry]:
        """Plan rewrites for deleting several pages at once.

        Pages being deleted are left out of the plan. Each remaining page
        gets at most one entry with every deleted slug degraded to text.

        Raises:
            InvalidRewriteError: If any slug is empty
            ProtectedPageError: If any slug is protected
        """
        substitutions = []
        for slug in slugs:
            self._validate(slug, RewriteMode.DELETE, None)
            self._check_unprotected(slug)
            substitutions.append(_substitution(slug, RewriteMode.DELETE, None))

        plan = self._plan(pages, substitutions, set(slugs))
        logger.info(
            f"Planned delete of {len(substitutions)} page(s): "
            f"{len(plan)} referencing page(s) to update"
        )
        return plan

    def rewrite_content(
        self,
        content: PageContent,
        affected_slug: str,
        mode: RewriteMode,
        new_slug: Optional[str] = None,
    ) -> Tuple[PageContent, bool]:
        """Rewrite a single piece of content.

        Returns:
            Tuple of (content, changed). When nothing matched, the input
            content object is returned unchanged.
        """
        mode = self._validate(affected_slug, mode, new_slug)
        return self._rewrite(content, [_substitution(affected_slug, mode, new_slug)])

    def _plan(
        self,
        pages: Iterable[Page],
        substitutions: List[_Substitution],
        excluded_slugs: set,
    ) -> List[RewriteEntry]:
        plan = []
        for page in pages:
            if page.slug in excluded_slugs:
                continue
            updated, changed = self._rewrite(page.content, substitutions)
            if changed:
                logger.debug(f"Page {page.id} ({page.slug}) references rewritten")
                plan.append(RewriteEntry(page_id=page.id, updated_content=updated))
        return plan

    def _validate(
        self,
        affected_slug: str,
        mode: RewriteMode,
        new_slug: Optional[str],
    ) -> RewriteMode:
        if not isinstance(affected_slug, str) or not affected_slug:
            raise InvalidRewriteError("slug must be a non-empty string", affected_slug)

        try:
            mode = RewriteMode(mode)
        except ValueError:
            raise InvalidRewriteError(f"unknown mode {mode!r}", affected_slug) from None

        if mode == RewriteMode.RENAME:
            if not new_slug:
                raise InvalidRewriteError("rename requires a new slug", affected_slug)
            if new_slug == affected_slug:
                raise InvalidRewriteError("new slug equals the old slug", affected_slug)
        return mode

    def _check_unprotected(self, slug: str) -> None:
        if slug in self.protected_slugs:
            raise ProtectedPageError(slug)

    def _rewrite(
        self,
        content: PageContent,
        substitutions: List[_Substitution],
    ) -> Tuple[PageContent, bool]:
        if isinstance(content, TreeContent):
            updated_doc = self._rewrite_tree(content.root, substitutions)
            if updated_doc is None:
                return content, False
            return TreeContent(updated_doc), True

        updated_text = self._rewrite_text(content.text, substitutions)
        if updated_text == content.text:
            return content, False
        return MarkupContent(updated_text), True

    def _rewrite_text(self, text: str, substitutions: List[_Substitution]) -> str:
        if not text:
            return text
        for sub in substitutions:
            if sub.pattern is None or not sub.pattern.search(text):
                continue
            if sub.mode == RewriteMode.RENAME and "]" in sub.new_slug:
                raise InvalidRewriteError(
                    f"new slug '{sub.new_slug}' cannot appear in a bracket token", sub.slug
                )
            replacement = sub.markup_replacement
            # Callable replacement keeps backslashes in slugs literal
            text = sub.pattern.sub(lambda _match: replacement, text)
        return text

    def _rewrite_tree(
        self,
        document: DocDocument,
        substitutions: List[_Substitution],
    ) -> Optional[DocDocument]:
        """Return a rewritten copy of the document, or None if unchanged."""
        # Work on a copy so the snapshot stays untouched
        copy = DocParser().parse_document(document.to_dict())
        new_content, changed = self._rewrite_nodes(copy.content, substitutions)
        if not changed:
            return None
        copy.content = new_content
        return copy

    def _rewrite_nodes(
        self,
        nodes: List[DocNode],
        substitutions: List[_Substitution],
    ) -> Tuple[List[DocNode], bool]:
        changed = False
        result = []

        for node in nodes:
            node_type = node.node_type

            if node_type == DocNodeType.PAGE_LINK:
                sub = next(
                    (s for s in substitutions if node.attrs.get("slug") == s.slug), None
                )
                if sub is not None:
                    changed = True
                    if sub.mode == RewriteMode.RENAME:
                        node.attrs["slug"] = sub.new_slug
                    else:
                        node = DocNode(
                            type=DocNodeType.TEXT.value,
                            text=SlugConverter.plain_text_from_slug(sub.slug),
                        )

            elif node_type == DocNodeType.TEXT and node.text:
                new_text = self._rewrite_text(node.text, substitutions)
                if new_text != node.text:
                    node.text = new_text
                    changed = True

            if node.content:
                node.content, child_changed = self._rewrite_nodes(node.content, substitutions)
                changed = changed or child_changed

            result.append(node)

        return result, changed
