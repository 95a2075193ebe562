"""
Core log buffer, ingestion gate and session for perflogctl.

This subpackage holds everything that has state: the bounded row buffer,
the pause-gated router in front of it, and the session object that owns
both. It knows nothing about curses, files or feeds; hosts hand it
decoded events and a connection check.

Modules:
    - model: PerformanceLogEntry and payload validation
    - buffer: Bounded FIFO log buffer with a live read-only view
    - gate: Pause state machine and event routing
    - session: Per-session owner exposing the control surface
    - errors: Exception types
"""

from .buffer import DEFAULT_LIMIT, LogBuffer, LogBufferView
from .errors import PerfLogError, ValidationError
from .gate import MEASURE_EVENT, SESSION_START_EVENT, IngestionGate, PauseState
from .model import EntryType, PerformanceLogEntry, parse_entry
from .session import PerfLogSession

__all__ = [
    "DEFAULT_LIMIT",
    "EntryType",
    "IngestionGate",
    "LogBuffer",
    "LogBufferView",
    "MEASURE_EVENT",
    "PauseState",
    "PerfLogError",
    "PerfLogSession",
    "PerformanceLogEntry",
    "SESSION_START_EVENT",
    "ValidationError",
    "parse_entry",
]
