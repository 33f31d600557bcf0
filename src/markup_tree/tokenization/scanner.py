"""Regular-expression token scanner for markup text.

The scanner makes one left-to-right pass over the input and recognizes three
kinds of markup: start tags (``<name attrs>``, optionally self-closing),
end tags (``</name>``) and comments (``<!--...-->``). Character content
between two recognized tokens becomes a TEXT token once trimmed. The input
is scanned as if wrapped in an implicit container, so content after the last
tag is also a TEXT token: it sits before the container's closing tag.
"""

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple

from markup_tree.shared import ParserConfig, get_logger
from markup_tree.shared.config import NAME_PATTERN

# Leftmost match wins; a comment cannot start a tag because "!" is not a
# name character.
TAG_PATTERN = re.compile(
    rf"<(/)?({NAME_PATTERN})([^>]*)>|<!--(.*?)-->",
    re.DOTALL,
)
ATTRIBUTE_PATTERN = re.compile(
    rf"""({NAME_PATTERN})\s*=\s*("|')(.*?)\2""",
    re.DOTALL,
)
DECLARATION_PATTERN = re.compile(r"\s*(<\?[^>]*\?>)")


class TokenType(Enum):
    """Markup token types recognized by the scanner."""

    TEXT = auto()       # Trimmed character content between two tokens
    START_TAG = auto()  # <name attrs> or <name attrs/>
    END_TAG = auto()    # </name>
    COMMENT = auto()    # <!-- ... -->


@dataclass(frozen=True)
class TokenPosition:
    """Position information for markup tokens."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "column": self.column, "offset": self.offset}


@dataclass
class Token:
    """A single markup token.

    ``value`` holds the tag name for START_TAG/END_TAG tokens and the trimmed
    content for TEXT/COMMENT tokens.
    """

    type: TokenType
    value: str
    position: TokenPosition
    attributes: Dict[str, str] = field(default_factory=dict)
    self_closing: bool = False
    raw_content: Optional[str] = None

    @property
    def is_tag(self) -> bool:
        return self.type in (TokenType.START_TAG, TokenType.END_TAG)


@dataclass
class TokenizationResult:
    """Tokens of one input plus its leading declaration."""

    tokens: List[Token] = field(default_factory=list)
    declaration: Optional[str] = None
    characters_processed: int = 0

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    @property
    def type_distribution(self) -> Dict[str, int]:
        """Count tokens per token type name."""
        distribution: Dict[str, int] = {}
        for token in self.tokens:
            name = token.type.name
            distribution[name] = distribution.get(name, 0) + 1
        return distribution


def strip_declaration(text: str) -> Tuple[Optional[str], int]:
    """Locate a leading ``<?...?>`` declaration.

    Args:
        text: Raw markup

    Returns:
        Tuple of the declaration (or None) and the offset where the body
        starts
    """
    match = DECLARATION_PATTERN.match(text)
    if match is None:
        return None, 0
    return match.group(1), match.end()


def parse_attributes(attribute_string: str) -> Dict[str, str]:
    """Extract ``name="value"`` / ``name='value'`` pairs from a start tag.

    Unquoted values and bare names are ignored. When a name repeats, the last
    occurrence wins.

    >>> parse_attributes(' id="p1" class=\\'c2\\'')
    {'id': 'p1', 'class': 'c2'}
    """
    return {
        match.group(1): match.group(3)
        for match in ATTRIBUTE_PATTERN.finditer(attribute_string)
    }


class _PositionTracker:
    """Incremental offset to line/column mapping."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._offset = 0
        self._line = 1
        self._line_start = 0

    def position(self, offset: int) -> TokenPosition:
        # Offsets arrive in increasing order during a scan
        newlines = self._text.count("\n", self._offset, offset)
        if newlines:
            self._line += newlines
            self._line_start = self._text.rfind("\n", self._offset, offset) + 1
        self._offset = offset
        return TokenPosition(
            line=self._line,
            column=offset - self._line_start + 1,
            offset=offset,
        )


class MarkupScanner:
    """Single-pass scanner turning markup text into tokens.

    Examples:
        >>> result = MarkupScanner().scan('<a id="1">hi</a>')
        >>> [token.type.name for token in result.tokens]
        ['START_TAG', 'TEXT', 'END_TAG']
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "markup_scanner")

    def scan(self, text: str) -> TokenizationResult:
        """Scan ``text`` into tokens.

        Args:
            text: Markup to scan

        Returns:
            TokenizationResult with tokens in document order
        """
        if not isinstance(text, str):
            raise TypeError(f"Markup must be a str, not {type(text).__name__}")

        result = TokenizationResult(characters_processed=len(text))
        body_start = 0
        if self.config.strip_declaration:
            result.declaration, body_start = strip_declaration(text)

        tracker = _PositionTracker(text)
        last_index = body_start

        for match in TAG_PATTERN.finditer(text, body_start):
            text_token = self._text_token(text, last_index, match.start(), tracker)
            if text_token is not None:
                result.tokens.append(text_token)
            last_index = match.end()

            closing, name, attribute_string, comment = match.groups()
            position = tracker.position(match.start())

            if name is None:
                result.tokens.append(Token(
                    type=TokenType.COMMENT,
                    value=comment.strip(),
                    position=position,
                    raw_content=match.group(0),
                ))
            elif closing:
                result.tokens.append(Token(
                    type=TokenType.END_TAG,
                    value=name,
                    position=position,
                    raw_content=match.group(0),
                ))
            else:
                result.tokens.append(Token(
                    type=TokenType.START_TAG,
                    value=name,
                    position=position,
                    attributes=parse_attributes(attribute_string),
                    self_closing=attribute_string.rstrip().endswith("/"),
                    raw_content=match.group(0),
                ))

        # Text before the implicit closing tag of the container
        text_token = self._text_token(text, last_index, len(text), tracker)
        if text_token is not None:
            result.tokens.append(text_token)

        self.logger.debug(
            "Markup scan completed",
            extra={
                "token_count": result.token_count,
                "has_declaration": result.declaration is not None,
            }
        )
        return result

    def _text_token(
        self,
        text: str,
        start: int,
        end: int,
        tracker: _PositionTracker
    ) -> Optional[Token]:
        raw = text[start:end]
        content = raw.strip()
        if not content:
            return None
        leading = len(raw) - len(raw.lstrip())
        return Token(
            type=TokenType.TEXT,
            value=content,
            position=tracker.position(start + leading),
            raw_content=raw,
        )
