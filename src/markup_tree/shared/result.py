"""Diagnostic and metric types shared by the parser and serializer.

The codec prefers degrading over raising when it meets malformed markup.
Every degradation is recorded as a ``DiagnosticEntry`` so callers can still
see what was ignored, dropped, or repaired.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Content was ignored or dropped
    ERROR = auto()      # Conversion produced a degraded result
    CRITICAL = auto()   # Conversion could not produce a result


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert the entry to a JSON-friendly dictionary."""
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.position is not None:
            result["position"] = dict(self.position)
        if self.details:
            result["details"] = dict(self.details)
        return result


@dataclass
class ConversionMetrics:
    """Counters and timing for a single conversion."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    tokens_scanned: int = 0
    elements: int = 0
    comments: int = 0
    text_runs: int = 0
    max_depth: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def node_count(self) -> int:
        """Total number of tree nodes produced."""
        return self.elements + self.comments + self.text_runs
