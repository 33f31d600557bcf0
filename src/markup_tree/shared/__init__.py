"""Shared utilities for the markup tree codec.

This module provides the configuration objects, diagnostic types, and logging
helpers used by both conversion directions.
"""

from .config import (
    CodecConfig,
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    SerializerConfig,
    TreeConvention,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    ConversionMetrics,
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "CodecConfig",
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "SerializerConfig",
    "TreeConvention",
    "CorrelationLogger",
    "get_logger",
    "ConversionMetrics",
    "DiagnosticEntry",
    "DiagnosticSeverity",
]
