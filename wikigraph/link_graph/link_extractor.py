"""Reference extraction from page content.

This module parses page content (markup text or a document tree) into the
set of page slugs it links to, the handles it mentions and the external
URLs it contains.

Markup syntax:
    [some-slug]   page link, the bracketed text is the slug verbatim
    @handle       mention of an external handle
    http(s)://... external URL
"""

import logging
import re
from typing import Any, Dict, Iterator, List, Match

from .doc_models import DocDocument, DocNodeType
from .models import ExtractedReferences, MarkupContent, TreeContent, content_from_raw

logger = logging.getLogger(__name__)

PAGE_LINK_PATTERN = re.compile(r"\[([^\]]+)\]")
MENTION_PATTERN = re.compile(r"@(\w+)")
URL_PATTERN = re.compile(r"https?://[^\s<>\"'()\[\]]+")


class _OrderedSet:
    """Insertion-ordered de-duplicating collector."""

    def __init__(self):
        self._items: Dict[str, None] = {}

    def add(self, item: str) -> None:
        self._items.setdefault(item, None)

    def to_tuple(self) -> tuple:
        return tuple(self._items)


def iter_page_link_tokens(text: str) -> Iterator[Match[str]]:
    """Yield every `[slug]` token match in text, including repeats.

    Use this instead of the de-duplicated result of extract_references
    when occurrences matter.
    """
    if not text:
        return iter(())
    return PAGE_LINK_PATTERN.finditer(text)


def iter_mention_tokens(text: str) -> Iterator[Match[str]]:
    """Yield every `@handle` match in text, including repeats."""
    if not text:
        return iter(())
    return MENTION_PATTERN.finditer(text)


class LinkExtractor:
    """Extracts page links, mentions and external URLs from content.

    Extraction never normalizes slugs (no trimming, no case folding): the
    captured text must match an existing slug exactly downstream.

    Example:
        >>> refs = LinkExtractor().extract_references("see [a] and [a], ask @bob")
        >>> refs.page_links
        ('a',)
        >>> refs.mentions
        ('bob',)
    """

    def extract_references(self, content: Any) -> ExtractedReferences:
        """Extract references from markup or document-tree content.

        Args:
            content: MarkupContent, TreeContent, a raw string, a raw
                document dict, or None

        Returns:
            ExtractedReferences with de-duplicated, first-seen ordered
            page links, mentions and external URLs. Empty content gives
            an empty result.

        Raises:
            ContentTypeError: If content is of an unsupported type
        """
        content = content_from_raw(content)

        page_links = _OrderedSet()
        mentions = _OrderedSet()
        urls = _OrderedSet()

        if isinstance(content, TreeContent):
            self._extract_from_tree(content.root, page_links, mentions, urls)
        elif isinstance(content, MarkupContent):
            self._extract_from_text(content.text, page_links, mentions, urls)

        return ExtractedReferences(
            page_links=page_links.to_tuple(),
            mentions=mentions.to_tuple(),
            external_urls=urls.to_tuple(),
        )

    def extract_page_links(self, content: Any) -> List[str]:
        """Shortcut returning only the page-link slugs."""
        return list(self.extract_references(content).page_links)

    def _extract_from_text(
        self,
        text: str,
        page_links: _OrderedSet,
        mentions: _OrderedSet,
        urls: _OrderedSet,
    ) -> None:
        if not text:
            return
        for match in PAGE_LINK_PATTERN.finditer(text):
            page_links.add(match.group(1))
        for match in MENTION_PATTERN.finditer(text):
            mentions.add(match.group(1))
        for match in URL_PATTERN.finditer(text):
            urls.add(match.group(0))

    def _extract_from_tree(
        self,
        document: DocDocument,
        page_links: _OrderedSet,
        mentions: _OrderedSet,
        urls: _OrderedSet,
    ) -> None:
        for node in document.iter_nodes():
            node_type = node.node_type

            if node_type == DocNodeType.PAGE_LINK:
                slug = node.attrs.get("slug")
                if isinstance(slug, str) and slug:
                    page_links.add(slug)
                else:
                    logger.debug("Skipping pageLink node without a slug")

            elif node_type == DocNodeType.MENTION:
                username = node.attrs.get("username")
                if isinstance(username, str) and username:
                    mentions.add(username)

            elif node_type == DocNodeType.TEXT:
                # Legacy content may still carry raw bracket tokens in text
                self._extract_from_text(node.text or "", page_links, mentions, urls)
                for mark in node.marks:
                    href = mark.attrs.get("href")
                    if mark.type == "link" and isinstance(href, str) and href:
                        urls.add(href)


_default_extractor = LinkExtractor()


def extract_references(content: Any) -> ExtractedReferences:
    """Module-level shortcut for LinkExtractor().extract_references."""
    return _default_extractor.extract_references(content)
