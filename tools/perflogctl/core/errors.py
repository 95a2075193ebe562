"""
Error types for the perflogctl core.

Only malformed inbound events are treated as errors. Buffer eviction at
capacity and resuming while disconnected are normal behaviour and never
raise.
"""

from typing import Any, Optional


class PerfLogError(Exception):
    """Base class for all perflogctl errors."""


class ValidationError(PerfLogError):
    """
    Raised when an inbound event payload cannot become a log entry.

    The session catches this at the ingestion boundary, writes a WARN
    diagnostic and drops the event. It never reaches the event source.

    Attributes:
        field: The payload key that failed validation (None for the
               payload as a whole).
        reason: Short human-readable description of the problem.
        value: The offending value, kept for the diagnostic line.
    """

    def __init__(self, field: Optional[str], reason: str, value: Any = None):
        self.field = field
        self.reason = reason
        self.value = value
        where = f"field '{field}'" if field else "payload"
        super().__init__(f"invalid {where}: {reason}")
