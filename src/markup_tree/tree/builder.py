"""Tree building for the markup tree codec.

This module turns the scanner's token stream into a typed ``Document`` with a
stack machine. The stack is seeded with a synthetic container element so that
top-level content is handled like any nested content; at the end the
container is unwrapped when it holds exactly one element.

The builder never raises on malformed markup. Excess closing tags, mismatched
closing tags, unclosed elements and the synthetic-root fallback are reported
as diagnostics on the returned ``ParseResult``.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from markup_tree.shared import (
    CodecConfig,
    ConversionMetrics,
    DiagnosticEntry,
    DiagnosticSeverity,
    TreeConvention,
    get_logger,
)
from markup_tree.tokenization import (
    Token,
    TokenizationResult,
    TokenType,
)

from .convention import document_to_tree
from .model import CommentNode, Document, ElementNode, TextNode

MS_PER_SECOND = 1000


@dataclass
class ParseResult:
    """Result of converting markup into a tree.

    Holds the typed document, its mapping form, diagnostics describing what
    was ignored or dropped, and conversion metrics.
    """

    document: Document
    convention: TreeConvention = field(default_factory=TreeConvention)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: ConversionMetrics = field(default_factory=ConversionMetrics)
    declaration: Optional[str] = None
    correlation_id: Optional[str] = None

    @property
    def tree(self) -> Dict[str, Any]:
        """The document in mapping form, e.g. ``{"root": [{"root": [...]}]}``."""
        return document_to_tree(self.document, self.convention)

    @property
    def synthetic_root(self) -> bool:
        """True when the input did not resolve to a single root element."""
        return self.document.synthetic

    @property
    def root_tag(self) -> str:
        return self.document.root_tag

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id
        ))

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_warnings(self) -> bool:
        """Check if anything in the input was ignored or dropped."""
        return any(
            diag.severity in (
                DiagnosticSeverity.WARNING,
                DiagnosticSeverity.ERROR,
                DiagnosticSeverity.CRITICAL,
            )
            for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse result."""
        return {
            "root_tag": self.root_tag,
            "synthetic_root": self.synthetic_root,
            "elements": self.metrics.elements,
            "comments": self.metrics.comments,
            "text_runs": self.metrics.text_runs,
            "max_depth": self.metrics.max_depth,
            "processing_time_ms": self.metrics.processing_time_ms,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }


class MarkupTreeBuilder:
    """Stack machine that builds a typed document from markup tokens.

    Each builder call is independent; the builder keeps no state between
    ``build`` calls, so an instance may be reused.
    """

    COMPONENT = "tree_builder"

    def __init__(
        self,
        config: Optional[CodecConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Codec configuration (synthetic root tag, convention)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or CodecConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "markup_tree_builder")

    def build(self, tokens: Union[TokenizationResult, List[Token]]) -> ParseResult:
        """Build a document from a token stream.

        Args:
            tokens: Either a TokenizationResult or a plain list of tokens

        Returns:
            ParseResult containing the document, diagnostics and metrics
        """
        start_time = time.time()
        if isinstance(tokens, TokenizationResult):
            scan = tokens
        else:
            scan = TokenizationResult(tokens=list(tokens))

        container = ElementNode(tag=self.config.parser.synthetic_root_tag)
        result = ParseResult(
            document=Document(root=container, synthetic=True),
            convention=self.config.convention,
            declaration=scan.declaration,
            correlation_id=self.correlation_id,
        )
        metrics = result.metrics
        metrics.characters_processed = scan.characters_processed
        metrics.tokens_scanned = scan.token_count

        stack: List[ElementNode] = [container]

        for token in scan.tokens:
            current = stack[-1]

            if token.type is TokenType.TEXT:
                current.children.append(TextNode(token.value))
                metrics.text_runs += 1

            elif token.type is TokenType.COMMENT:
                current.children.append(CommentNode(token.value))
                metrics.comments += 1

            elif token.type is TokenType.END_TAG:
                self._close(stack, token, result)

            elif token.type is TokenType.START_TAG:
                element = ElementNode(tag=token.value, attributes=dict(token.attributes))
                current.children.append(element)
                metrics.elements += 1
                if not token.self_closing:
                    stack.append(element)
                    # Depth counts real elements only, not the container
                    metrics.max_depth = max(metrics.max_depth, len(stack) - 1)
                else:
                    metrics.max_depth = max(metrics.max_depth, len(stack))

        self._report_unclosed(stack, result)
        result.document = self._unwrap(container, result)

        metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
        self.logger.debug(
            "Tree building completed",
            extra={
                "root_tag": result.root_tag,
                "synthetic_root": result.synthetic_root,
                "elements": metrics.elements,
                "diagnostics_count": len(result.diagnostics),
            }
        )
        return result

    def _close(
        self,
        stack: List[ElementNode],
        token: Token,
        result: ParseResult
    ) -> None:
        """Pop the open element for an end tag; the container is never popped."""
        if len(stack) == 1:
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                f"Ignored closing tag </{token.value}> with no open element",
                self.COMPONENT,
                position=token.position.to_dict(),
            )
            self.logger.warning(
                "Ignored excess closing tag",
                extra={"tag": token.value, "offset": token.position.offset}
            )
            return

        closed = stack.pop()
        if closed.tag != token.value:
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                f"Closing tag </{token.value}> closed <{closed.tag}>",
                self.COMPONENT,
                position=token.position.to_dict(),
                details={"expected": closed.tag, "found": token.value},
            )

    def _report_unclosed(self, stack: List[ElementNode], result: ParseResult) -> None:
        for element in stack[1:]:
            result.add_diagnostic(
                DiagnosticSeverity.INFO,
                f"Element <{element.tag}> was never closed",
                self.COMPONENT,
                details={"tag": element.tag},
            )

    def _unwrap(self, container: ElementNode, result: ParseResult) -> Document:
        """Promote the container's only element to document root."""
        children = container.children
        if len(children) == 1 and isinstance(children[0], ElementNode):
            return Document(root=children[0])

        if not children:
            message = "No elements found; returning empty synthetic root"
        else:
            message = (
                f"Input has {len(children)} top-level entries; "
                "returning synthetic root"
            )
        result.add_diagnostic(
            DiagnosticSeverity.WARNING,
            message,
            self.COMPONENT,
            details={
                "top_level_entries": len(children),
                "synthetic_root_tag": container.tag,
            },
        )
        self.logger.warning(
            "Falling back to synthetic root",
            extra={"top_level_entries": len(children)}
        )
        return Document(root=container, synthetic=True)
