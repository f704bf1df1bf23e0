"""Data models for structured page documents.

This module defines the node tree used for rich page content. A document
is a `doc` root holding an ordered list of typed nodes (paragraphs,
headings, lists, inline page links, mentions, media). Page links and
mentions are first-class nodes carrying their target in `attrs`, so they
can be read without scanning text.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class DocNodeType(Enum):
    """Types of document nodes."""

    # Document root
    DOC = "doc"

    # Block nodes
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BULLET_LIST = "bulletList"
    ORDERED_LIST = "orderedList"
    LIST_ITEM = "listItem"
    IMAGE = "image"
    VIDEO = "video"
    YOUTUBE = "youtube"

    # Inline nodes
    TEXT = "text"
    HARD_BREAK = "hardBreak"
    PAGE_LINK = "pageLink"
    MENTION = "mention"

    # Other
    UNKNOWN = "unknown"


# Node types that are block-level content
BLOCK_NODE_TYPES = {
    DocNodeType.PARAGRAPH,
    DocNodeType.HEADING,
    DocNodeType.BULLET_LIST,
    DocNodeType.ORDERED_LIST,
    DocNodeType.LIST_ITEM,
    DocNodeType.IMAGE,
    DocNodeType.VIDEO,
    DocNodeType.YOUTUBE,
}


@dataclass
class DocMark:
    """Represents a text mark (formatting) on a text node.

    Attributes:
        type: Mark type (bold, italic, link, code, etc.)
        attrs: Mark-specific attributes (e.g. href for links)
    """

    type: str
    attrs: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DocNode:
    """Represents a node in the document tree.

    Attributes:
        type: Node type (paragraph, heading, text, pageLink, etc.)
        content: List of child nodes
        text: Text content (for text nodes)
        attrs: Node attributes (slug for pageLink, username for mention)
        marks: Text formatting marks
    """

    type: str
    content: List["DocNode"] = field(default_factory=list)
    text: Optional[str] = None
    attrs: Dict[str, Any] = field(default_factory=dict)
    marks: List[DocMark] = field(default_factory=list)

    @property
    def node_type(self) -> DocNodeType:
        """Get the DocNodeType enum value."""
        try:
            return DocNodeType(self.type)
        except ValueError:
            return DocNodeType.UNKNOWN

    @property
    def is_block(self) -> bool:
        """Check if this node is a block-level element."""
        return self.node_type in BLOCK_NODE_TYPES

    def iter_nodes(self) -> Iterator["DocNode"]:
        """Yield this node and all descendants, depth-first, in document order."""
        yield self
        for child in self.content:
            yield from child.iter_nodes()

    def get_text_content(self) -> str:
        """Text of this subtree as it would read in markup.

        Page links come out as their bracket token and mentions as
        `@username`. Children that are blocks are joined with a space,
        inline children are joined directly.
        """
        if self.text:
            return self.text

        kind = self.node_type
        if kind == DocNodeType.PAGE_LINK:
            return f"[{self.attrs.get('slug', '')}]"
        if kind == DocNodeType.MENTION:
            return f"@{self.attrs.get('username', '')}"

        parts = [text for text in (child.get_text_content() for child in self.content) if text]
        separator = " " if self.content and self.content[0].is_block else ""
        return separator.join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """JSON form of this node; empty optional keys are left out."""
        optional = {
            "text": self.text,
            "attrs": dict(self.attrs) if self.attrs else None,
            "marks": [_mark_to_dict(mark) for mark in self.marks] or None,
            "content": [child.to_dict() for child in self.content] or None,
        }
        node: Dict[str, Any] = {"type": self.type}
        node.update((key, value) for key, value in optional.items() if value is not None)
        return node


def _mark_to_dict(mark: DocMark) -> Dict[str, Any]:
    if mark.attrs:
        return {"type": mark.type, "attrs": dict(mark.attrs)}
    return {"type": mark.type}


@dataclass
class DocDocument:
    """Represents a complete structured document.

    Attributes:
        content: List of top-level nodes
        version: Optional schema version carried through serialization
    """

    content: List[DocNode] = field(default_factory=list)
    version: Optional[int] = None

    def iter_nodes(self) -> Iterator[DocNode]:
        """Yield every node in the document, depth-first, in document order."""
        for node in self.content:
            yield from node.iter_nodes()

    def get_text_content(self) -> str:
        """Text of the whole document, top-level blocks separated by newlines."""
        return "\n".join(
            text for text in (node.get_text_content() for node in self.content) if text
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the document to its JSON form.

        Returns:
            Dictionary suitable for JSON serialization
        """
        result: Dict[str, Any] = {"type": "doc"}
        if self.version is not None:
            result["version"] = self.version
        result["content"] = [node.to_dict() for node in self.content]
        return result
