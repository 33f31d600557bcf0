"""Markup Tree.

A bidirectional codec between markup text (elements, attributes, text and
comments) and a tree of nested mappings and ordered sequences.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), serialize()
- Level 2: Typed documents - parse_document(), serialize_document()
- Level 3: Configured codec - MarkupTreeCodec with CodecConfig
"""

__version__ = "0.1.0"
__author__ = "Markup Tree Team"

# Level 1 and Level 2: module functions
# Level 3: configured codec
from .api import (
    MarkupTreeCodec,
    parse,
    parse_document,
    round_trip,
    serialize,
    serialize_document,
    serialize_fragment,
)

# Configuration classes for advanced usage
from .shared.config import CodecConfig, TreeConvention

# Typed tree and result objects
from .tree import (
    CommentNode,
    Document,
    ElementNode,
    ParseResult,
    TextNode,
    TreeShapeError,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: mapping-based conversion
    "parse",
    "serialize",

    # Level 2: typed documents
    "parse_document",
    "serialize_document",
    "serialize_fragment",
    "round_trip",

    # Level 3: configured codec
    "MarkupTreeCodec",
    "CodecConfig",
    "TreeConvention",

    # Result objects and data structures
    "ParseResult",
    "Document",
    "ElementNode",
    "TextNode",
    "CommentNode",
    "TreeShapeError",
]
