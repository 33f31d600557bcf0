"""Serialization layer for the markup tree codec."""

from .serializer import MarkupSerializer, pretty_print

__all__ = [
    "MarkupSerializer",
    "pretty_print",
]
