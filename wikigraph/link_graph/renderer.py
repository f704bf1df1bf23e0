"""Render form of markup content: link tokens become anchor chips.

`[slug]` tokens become page-link anchors showing the target's title and
`@handle` tokens become mention anchors. Text already inside an `<a>`
element, and attribute values, are never linkified again, so rendering
output that already contains anchors does not nest them.
"""

import logging
import re
from typing import List, Mapping, Optional, Union

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from .title_cache import TitleCache

logger = logging.getLogger(__name__)

# Bracket tokens win over mentions they contain
_TOKEN_PATTERN = re.compile(r"\[(?P<slug>[^\]]+)\]|@(?P<handle>\w+)")

# Elements whose text is never linkified
_SKIP_PARENTS = {"a", "script", "style", "code", "pre"}

MENTION_URL = "https://x.com/{handle}"


class LinkRenderer:
    """Converts link tokens in markup into HTML anchors.

    Uses Python's built-in html.parser through BeautifulSoup, so plain
    text input (no tags) works as well as HTML fragments.

    Example:
        >>> LinkRenderer().render("see [my-page]", {"my-page": "My Page"})
        'see <a class="page-link" data-slug="my-page" href="/my-page?create=true">My Page</a>'
    """

    def __init__(self):
        self.parser = "html.parser"

    def render(
        self,
        text: str,
        titles: Optional[Union[TitleCache, Mapping[str, str]]] = None,
    ) -> str:
        """Render link tokens in markup as anchors.

        Args:
            text: Markup content (plain text or HTML fragment)
            titles: Slug -> display title lookup; unknown slugs display raw

        Returns:
            HTML string with page links and mentions as anchors
        """
        if not text:
            return ""

        soup = BeautifulSoup(text, self.parser)

        for text_node in list(soup.find_all(string=True)):
            if isinstance(text_node, Comment):
                continue
            if any(parent.name in _SKIP_PARENTS for parent in text_node.parents):
                continue

            replacements = self._split_text(soup, str(text_node), titles)
            if replacements is None:
                continue
            text_node.replace_with(*replacements)

        return str(soup)

    def _split_text(
        self,
        soup: BeautifulSoup,
        text: str,
        titles: Optional[Union[TitleCache, Mapping[str, str]]],
    ) -> Optional[List[Union[NavigableString, Tag]]]:
        """Split one text node into text and anchor pieces, or None if no token."""
        pieces: List[Union[NavigableString, Tag]] = []
        position = 0

        for match in _TOKEN_PATTERN.finditer(text):
            if match.start() > position:
                pieces.append(NavigableString(text[position:match.start()]))

            slug = match.group("slug")
            if slug is not None:
                pieces.append(self._page_link_anchor(soup, slug, self._title_for(slug, titles)))
            else:
                pieces.append(self._mention_anchor(soup, match.group("handle")))

            position = match.end()

        if not pieces:
            return None
        if position < len(text):
            pieces.append(NavigableString(text[position:]))
        return pieces

    def _title_for(
        self,
        slug: str,
        titles: Optional[Union[TitleCache, Mapping[str, str]]],
    ) -> str:
        if titles is None:
            return slug
        return titles.get(slug) or slug

    def _page_link_anchor(self, soup: BeautifulSoup, slug: str, title: str) -> Tag:
        anchor = soup.new_tag("a", href=f"/{slug}?create=true")
        anchor["class"] = "page-link"
        anchor["data-slug"] = slug
        anchor.string = title
        return anchor

    def _mention_anchor(self, soup: BeautifulSoup, handle: str) -> Tag:
        anchor = soup.new_tag(
            "a",
            href=MENTION_URL.format(handle=handle),
            target="_blank",
            rel="noopener noreferrer",
        )
        anchor["class"] = "mention"
        anchor.string = f"@{handle}"
        return anchor


def render_markup(
    text: str,
    titles: Optional[Union[TitleCache, Mapping[str, str]]] = None,
) -> str:
    """Module-level shortcut for LinkRenderer().render."""
    return LinkRenderer().render(text, titles)
