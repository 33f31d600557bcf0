"""Codec API with progressive disclosure for markup/tree conversion.

Level 1 is a pair of module functions, ``parse`` and ``serialize``, that
speak the mapping convention. Level 2 adds typed results
(``parse_document``) and the reusable ``MarkupTreeCodec`` class with its own
configuration and usage statistics.
"""

import time
from typing import Any, Dict, Optional

from markup_tree.serialization import MarkupSerializer
from markup_tree.shared import CodecConfig, get_logger
from markup_tree.tokenization import MarkupScanner
from markup_tree.tree import Document, MarkupTreeBuilder, ParseResult

MS_PER_SECOND = 1000
PREVIEW_LENGTH = 100  # Max length for content preview in logs


def parse_document(
    markup: str,
    config: Optional[CodecConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse markup into a typed document with diagnostics.

    Args:
        markup: Markup text, optionally starting with a ``<?...?>`` declaration
        config: Optional codec configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult with the document, its mapping form and diagnostics

    Examples:
        >>> result = parse_document('<root><item id="1">value</item></root>')
        >>> result.document.find("item").get_attribute("id")
        '1'
        >>> result.synthetic_root
        False
    """
    start_time = time.time()
    config = config or CodecConfig()
    logger = get_logger(__name__, correlation_id, "parse_document")

    logger.debug(
        "Starting parse",
        extra={
            "content_length": len(markup) if isinstance(markup, str) else None,
            "preview": (
                markup[:PREVIEW_LENGTH] + "..."
                if isinstance(markup, str) and len(markup) > PREVIEW_LENGTH
                else markup
            )
        }
    )

    scanner = MarkupScanner(config=config.parser, correlation_id=correlation_id)
    builder = MarkupTreeBuilder(config=config, correlation_id=correlation_id)
    result = builder.build(scanner.scan(markup))
    result.metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND

    logger.info(
        "Parse completed",
        extra={
            "root_tag": result.root_tag,
            "elements": result.metrics.elements,
            "synthetic_root": result.synthetic_root,
            "processing_time_ms": result.metrics.processing_time_ms,
        }
    )
    return result


def parse(
    markup: str,
    config: Optional[CodecConfig] = None,
    correlation_id: Optional[str] = None
) -> Dict[str, Any]:
    """Parse markup into the mapping-based tree.

    Examples:
        >>> parse('<a id="1">hello</a>')
        {'a': [{'a': [{'#text': 'hello'}], '@id': '1'}]}
    """
    return parse_document(markup, config, correlation_id).tree


def serialize(
    tree: Any,
    config: Optional[CodecConfig] = None,
    correlation_id: Optional[str] = None
) -> str:
    """Serialize a mapping-based tree to markup.

    Examples:
        >>> serialize({})
        ''
        >>> serialize({"a": [{"a": [{"#text": "hello"}], "@id": "1"}]})
        '<?xml version="1.0" encoding="UTF-8"?>\\n<a id="1">hello</a>'
    """
    return MarkupSerializer(config, correlation_id).serialize(tree)


def serialize_document(
    document: Document,
    config: Optional[CodecConfig] = None,
    correlation_id: Optional[str] = None
) -> str:
    """Serialize a typed document to markup."""
    return MarkupSerializer(config, correlation_id).serialize_document(document)


def serialize_fragment(
    node: Any,
    tag: Optional[str] = None,
    config: Optional[CodecConfig] = None,
    correlation_id: Optional[str] = None
) -> str:
    """Render one mapping node without declaration or layout pass."""
    return MarkupSerializer(config, correlation_id).serialize_fragment(node, tag)


def round_trip(
    markup: str,
    config: Optional[CodecConfig] = None,
    correlation_id: Optional[str] = None
) -> str:
    """Parse markup and serialize the resulting tree again."""
    return serialize(parse(markup, config, correlation_id), config, correlation_id)


class MarkupTreeCodec:
    """Reusable codec with fixed configuration and usage statistics.

    Examples:
        >>> codec = MarkupTreeCodec(CodecConfig.compact())
        >>> codec.round_trip("<a><b>x</b></a>")
        '<a><b>x</b></a>'
        >>> codec.statistics["parse_count"]
        1
    """

    def __init__(
        self,
        config: Optional[CodecConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "markup_tree_codec")
        self._configure(config or CodecConfig())
        self.reset_statistics()

    def _configure(self, config: CodecConfig) -> None:
        self.config = config
        self._scanner = MarkupScanner(config.parser, self.correlation_id)
        self._builder = MarkupTreeBuilder(config, self.correlation_id)
        self._serializer = MarkupSerializer(config, self.correlation_id)

    def parse_document(self, markup: str) -> ParseResult:
        """Parse markup into a typed document with diagnostics."""
        start_time = time.time()
        result = self._builder.build(self._scanner.scan(markup))
        elapsed = (time.time() - start_time) * MS_PER_SECOND
        result.metrics.processing_time_ms = elapsed

        self._parse_count += 1
        self._total_processing_time += elapsed
        if result.synthetic_root:
            self._fallback_count += 1
        return result

    def parse(self, markup: str) -> Dict[str, Any]:
        """Parse markup into the mapping-based tree."""
        return self.parse_document(markup).tree

    def serialize(self, tree: Any) -> str:
        """Serialize a mapping-based tree to markup."""
        start_time = time.time()
        try:
            return self._serializer.serialize(tree)
        finally:
            self._serialize_count += 1
            self._total_processing_time += (time.time() - start_time) * MS_PER_SECOND

    def serialize_document(self, document: Document) -> str:
        """Serialize a typed document to markup."""
        start_time = time.time()
        try:
            return self._serializer.serialize_document(document)
        finally:
            self._serialize_count += 1
            self._total_processing_time += (time.time() - start_time) * MS_PER_SECOND

    def serialize_fragment(self, node: Any, tag: Optional[str] = None) -> str:
        """Render one mapping node without declaration or layout pass."""
        return self._serializer.serialize_fragment(node, tag)

    def round_trip(self, markup: str) -> str:
        """Parse markup and serialize the resulting tree again."""
        return self.serialize(self.parse(markup))

    def reconfigure(self, config: CodecConfig) -> None:
        """Replace the configuration; statistics are kept."""
        self._configure(config)
        self.logger.info(
            "Codec reconfigured",
            extra={"config_name": config.name}
        )

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get codec usage statistics."""
        return {
            "parse_count": self._parse_count,
            "serialize_count": self._serialize_count,
            "fallback_count": self._fallback_count,
            "total_processing_time_ms": self._total_processing_time,
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset codec usage statistics."""
        self._parse_count = 0
        self._serialize_count = 0
        self._fallback_count = 0
        self._total_processing_time = 0.0
