"""Public API for the markup tree codec."""

from .codec import (
    MarkupTreeCodec,
    parse,
    parse_document,
    round_trip,
    serialize,
    serialize_document,
    serialize_fragment,
)

__all__ = [
    "MarkupTreeCodec",
    "parse",
    "parse_document",
    "round_trip",
    "serialize",
    "serialize_document",
    "serialize_fragment",
]
