"""Conversions between slugs, titles and plain text.

Slugs are lowercase, hyphen-separated keys. Deriving a title from a slug
is lossy: case and punctuation of the original title are not recoverable.
"""

import re


class SlugConverter:
    """Converts between page slugs, display titles and inert text.

    Conversion rules:
    - title -> slug: lowercase, whitespace -> hyphen, characters other
      than word characters and hyphens dropped, repeated hyphens collapsed,
      leading/trailing hyphens trimmed
    - slug -> title: hyphens -> spaces, first letter of each word
      uppercased (rest of the word unchanged)
    - slug -> plain text: hyphens -> spaces, nothing else

    Examples:
        - "My First Page!" -> "my-first-page"
        - "my-first-page" -> "My First Page"
        - "to-delete" -> "to delete"
    """

    @staticmethod
    def slug_from_title(title: str) -> str:
        """Convert a page title to a slug.

        Examples:
            >>> SlugConverter.slug_from_title("Hello World")
            'hello-world'
            >>> SlugConverter.slug_from_title("  Q&A -- Notes ")
            'qa-notes'
        """
        slug = title.lower()
        slug = re.sub(r"\s+", "-", slug)
        slug = re.sub(r"[^\w\-]+", "", slug)
        slug = re.sub(r"\-\-+", "-", slug)
        return slug.strip("-")

    @staticmethod
    def title_from_slug(slug: str) -> str:
        """Derive a display title for a page created from a slug.

        Examples:
            >>> SlugConverter.title_from_slug("my-new-page")
            'My New Page'
        """
        words = slug.replace("-", " ").split(" ")
        return " ".join(word[:1].upper() + word[1:] for word in words)

    @staticmethod
    def plain_text_from_slug(slug: str) -> str:
        """Text a link degrades to when its target page is deleted.

        Examples:
            >>> SlugConverter.plain_text_from_slug("to-delete")
            'to delete'
        """
        return slug.replace("-", " ")
