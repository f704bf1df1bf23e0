"""Parser for structured page documents.

This module parses the JSON form of a rich page document into DocDocument
and DocNode objects.
"""

import logging
from typing import Any, Dict

from .doc_models import DocDocument, DocMark, DocNode

logger = logging.getLogger(__name__)


class DocParser:
    """Parser for structured page documents.

    Converts document JSON (as produced by the rich-text editor and stored
    by the storage layer) into a DocDocument tree.
    """

    def parse_document(self, doc_json: Dict[str, Any]) -> DocDocument:
        """Parse a document dictionary into a DocDocument.

        Args:
            doc_json: The document as a dictionary (parsed JSON)

        Returns:
            DocDocument with parsed content tree

        Raises:
            ValueError: If the dictionary is not a document
        """
        if not isinstance(doc_json, dict):
            raise ValueError("Document must be a dictionary")

        doc_type = doc_json.get("type")
        if doc_type != "doc":
            raise ValueError(f"Expected type 'doc', got '{doc_type}'")

        content_data = doc_json.get("content") or []
        content = [
            self._parse_node(node_data)
            for node_data in content_data
            if isinstance(node_data, dict)
        ]

        return DocDocument(content=content, version=doc_json.get("version"))

    def _parse_node(self, node_data: Dict[str, Any]) -> DocNode:
        """Parse a single node from JSON.

        Args:
            node_data: Node data as a dictionary

        Returns:
            Parsed DocNode
        """
        node_type = node_data.get("type", "unknown")
        text = node_data.get("text")
        attrs = node_data.get("attrs") or {}

        marks = [
            DocMark(type=m.get("type", "unknown"), attrs=m.get("attrs") or {})
            for m in node_data.get("marks") or []
            if isinstance(m, dict)
        ]

        # Editors occasionally emit null entries in content arrays
        content = []
        for child in node_data.get("content") or []:
            if not isinstance(child, dict):
                logger.debug(f"Skipping non-object child in '{node_type}' node")
                continue
            content.append(self._parse_node(child))

        return DocNode(
            type=node_type,
            content=content,
            text=text,
            attrs=dict(attrs),
            marks=marks,
        )


def is_document(value: Any) -> bool:
    """Check whether a raw storage value looks like a document tree."""
    return isinstance(value, dict) and value.get("type") == "doc"
