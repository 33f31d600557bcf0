"""Tree layer for the markup tree codec.

Key Components:
    ElementNode, TextNode, CommentNode: Typed tree nodes
    Document: Root element plus the synthetic-root marker
    MarkupTreeBuilder: Stack machine building documents from tokens
    ParseResult: Document, mapping form, diagnostics and metrics
    document_to_tree / tree_to_document: Mapping convention conversions
"""

from .builder import MarkupTreeBuilder, ParseResult
from .convention import (
    TreeShapeError,
    document_to_tree,
    mapping_to_node,
    node_to_mapping,
    tree_to_document,
)
from .model import CommentNode, Document, ElementNode, Node, TextNode

__all__ = [
    "MarkupTreeBuilder",
    "ParseResult",
    "TreeShapeError",
    "document_to_tree",
    "mapping_to_node",
    "node_to_mapping",
    "tree_to_document",
    "CommentNode",
    "Document",
    "ElementNode",
    "Node",
    "TextNode",
]
