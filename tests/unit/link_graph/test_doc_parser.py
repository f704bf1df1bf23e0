"""Unit tests for link_graph.doc_parser and doc_models modules."""

import pytest

from wikigraph.link_graph.doc_models import DocNodeType
from wikigraph.link_graph.doc_parser import DocParser, is_document
from tests.fixtures.sample_pages import (
    TREE_DOC_LINKING_TO_GUIDE,
    doc,
    mention_node,
    page_link_node,
    paragraph,
    text_node,
)


class TestParseDocument:
    """Test cases for DocParser.parse_document."""

    def setup_method(self):
        self.parser = DocParser()

    def test_parses_nested_nodes(self):
        """Node types, attrs and text are read from the JSON form."""
        document = self.parser.parse_document(TREE_DOC_LINKING_TO_GUIDE)

        para = document.content[0]
        assert para.node_type == DocNodeType.PARAGRAPH
        assert [n.node_type for n in para.content] == [
            DocNodeType.TEXT,
            DocNodeType.PAGE_LINK,
            DocNodeType.TEXT,
            DocNodeType.MENTION,
        ]
        assert para.content[1].attrs == {"slug": "guide"}
        assert not para.content[1].is_block
        assert para.is_block

    def test_unknown_node_type(self):
        """Unrecognised types map to UNKNOWN but keep their raw type."""
        document = self.parser.parse_document(doc({"type": "table", "content": []}))

        assert document.content[0].node_type == DocNodeType.UNKNOWN
        assert document.content[0].type == "table"

    def test_skips_null_children(self):
        """Non-object entries in content arrays are dropped."""
        document = self.parser.parse_document(
            {"type": "doc", "content": [None, paragraph(text_node("x"), None)]}
        )

        assert len(document.content) == 1
        assert len(document.content[0].content) == 1

    def test_rejects_non_document(self):
        """Only dictionaries with type 'doc' are documents."""
        with pytest.raises(ValueError):
            self.parser.parse_document({"type": "paragraph"})
        with pytest.raises(ValueError):
            self.parser.parse_document(["not", "a", "dict"])

    def test_version_round_trips(self):
        """A schema version is kept through to_dict."""
        raw = {"type": "doc", "version": 1, "content": []}

        assert self.parser.parse_document(raw).to_dict() == raw


class TestDocModels:
    """Test cases for DocDocument and DocNode helpers."""

    def test_to_dict_round_trip_with_marks(self):
        """Marks with and without attrs serialize back unchanged."""
        raw = doc(
            paragraph(
                text_node("site", marks=[{"type": "link", "attrs": {"href": "https://e.example"}}]),
                text_node("bold", marks=[{"type": "strong"}]),
            )
        )

        assert DocParser().parse_document(raw).to_dict() == raw

    def test_iter_nodes_is_depth_first(self):
        """iter_nodes walks parents before children in document order."""
        document = DocParser().parse_document(
            doc(paragraph(text_node("a"), page_link_node("b")), paragraph(mention_node("c")))
        )

        assert [n.type for n in document.iter_nodes()] == [
            "paragraph", "text", "pageLink", "paragraph", "mention",
        ]

    def test_get_text_content_renders_links_as_tokens(self):
        """Page links read as `[slug]` and mentions as `@name`."""
        document = DocParser().parse_document(TREE_DOC_LINKING_TO_GUIDE)

        assert document.get_text_content() == "Read the [guide] and ping @alice"

    def test_blocks_are_separated(self):
        """Top-level blocks are joined by newlines."""
        document = DocParser().parse_document(
            doc(paragraph(text_node("one")), paragraph(text_node("two")))
        )

        assert document.get_text_content() == "one\ntwo"


class TestIsDocument:
    """Test cases for is_document."""

    def test_detects_documents(self):
        """Only dicts typed 'doc' are documents."""
        assert is_document(doc()) is True
        assert is_document({"type": "text"}) is False
        assert is_document("[a]") is False
        assert is_document(None) is False
