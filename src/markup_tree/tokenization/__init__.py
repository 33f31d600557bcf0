"""Tokenization layer for the markup tree codec.

Key Components:
    MarkupScanner: Single-pass regex scanner producing tokens
    Token: Individual token with type, value, attributes and position
    TokenizationResult: Tokens plus the stripped declaration
"""

from .scanner import (
    ATTRIBUTE_PATTERN,
    TAG_PATTERN,
    MarkupScanner,
    Token,
    TokenizationResult,
    TokenPosition,
    TokenType,
    parse_attributes,
    strip_declaration,
)

__all__ = [
    "ATTRIBUTE_PATTERN",
    "TAG_PATTERN",
    "MarkupScanner",
    "Token",
    "TokenizationResult",
    "TokenPosition",
    "TokenType",
    "parse_attributes",
    "strip_declaration",
]
