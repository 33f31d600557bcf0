"""Markup serialization for typed and mapping trees.

The serializer walks a typed tree top-down and renders each node:

- text runs are written as is (no entity escaping);
- comments become ``<!--text-->``;
- attribute values are double-quoted, or single-quoted when they contain
  a double quote;
- elements with blank content become self-closing ``<tag attrs/>``,
  everything else ``<tag attrs>content</tag>``.

Whole documents get the XML declaration line and a cosmetic layout pass that
puts every tag on its own line.
"""

import re
import time
from collections.abc import Mapping
from typing import Any, Optional

from markup_tree.shared import CodecConfig, get_logger
from markup_tree.tree import (
    CommentNode,
    Document,
    ElementNode,
    Node,
    TextNode,
    mapping_to_node,
    tree_to_document,
)

MS_PER_SECOND = 1000

_INTER_TAG_WHITESPACE = re.compile(r">\s+<")


def pretty_print(markup: str) -> str:
    """Put every tag on its own line.

    Whitespace-only gaps between ``>`` and ``<`` are removed first, then a
    newline is inserted between every adjacent ``><`` pair.

    >>> pretty_print("<a>  <b/> </a>")
    '<a>\\n<b/>\\n</a>'
    """
    return _INTER_TAG_WHITESPACE.sub("><", markup).replace("><", ">\n<")


def _quote_attribute(value: str) -> str:
    # Single quotes when the value holds a double quote
    if '"' in value and "'" not in value:
        return f"'{value}'"
    return f'"{value}"'


class MarkupSerializer:
    """Recursive renderer from trees to markup text.

    Examples:
        >>> MarkupSerializer().serialize({"a": [{"a": [], "@id": "1"}]})
        '<?xml version="1.0" encoding="UTF-8"?>\\n<a id="1"/>'
    """

    def __init__(
        self,
        config: Optional[CodecConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or CodecConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "markup_serializer")

    def serialize(self, tree: Any) -> str:
        """Serialize a mapping tree to a markup document.

        Args:
            tree: ``{root_tag: [root_element]}`` mapping

        Returns:
            Markup text, or an empty string when the tree has no keys or its
            root value is missing, not a sequence, or empty

        Raises:
            TreeShapeError: When the serializer is strict and the tree breaks
                the tree convention
        """
        document = tree_to_document(
            tree,
            convention=self.config.convention,
            strict=self.config.serializer.strict,
            correlation_id=self.correlation_id,
        )
        if document is None:
            self.logger.debug("Degenerate tree serialized to empty output")
            return ""
        return self.serialize_document(document)

    def serialize_document(self, document: Document) -> str:
        """Serialize a typed document, declaration and layout included."""
        start_time = time.time()
        settings = self.config.serializer

        output = self.render_node(document.root)
        if settings.include_declaration:
            output = f"{settings.declaration}\n{output}"
        if settings.pretty_print:
            output = pretty_print(output)

        self.logger.debug(
            "Document serialized",
            extra={
                "root_tag": document.root_tag,
                "output_length": len(output),
                "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
            }
        )
        return output

    def serialize_fragment(self, node: Any, tag: Optional[str] = None) -> str:
        """Render one mapping node without declaration or layout pass.

        Args:
            node: Element body (with ``tag``) or a sequence entry (without)
            tag: Tag name for an element body

        Returns:
            Rendered markup; an empty string for an empty tagless mapping
        """
        if tag is None and isinstance(node, Mapping) and not node:
            return ""
        typed = mapping_to_node(
            node,
            tag=tag,
            convention=self.config.convention,
            strict=self.config.serializer.strict,
            correlation_id=self.correlation_id,
        )
        if typed is None:
            return ""
        return self.render_node(typed)

    def render_node(self, node: Node) -> str:
        """Render a typed node and its descendants."""
        if isinstance(node, TextNode):
            return node.text
        if isinstance(node, CommentNode):
            return f"<!--{node.text}-->"
        if isinstance(node, ElementNode):
            return self._render_element(node)
        raise TypeError(f"Unsupported node type: {type(node).__name__}")

    def _render_element(self, element: ElementNode) -> str:
        attributes = "".join(
            f" {name}={_quote_attribute(value)}"
            for name, value in element.attributes.items()
        )
        content = "".join(self.render_node(child) for child in element.children)

        if not content.strip():
            return f"<{element.tag}{attributes}/>"
        return f"<{element.tag}{attributes}>{content}</{element.tag}>"
