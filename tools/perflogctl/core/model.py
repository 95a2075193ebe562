"""
Data models for performance log entries.

This module defines the record type stored by the log buffer and the
boundary check that turns a raw event payload into one.

Purpose:
    The instrumented process reports timings as loosely typed JSON
    objects. Everything past the ingestion boundary relies on entries
    having a name, a known entry type and numeric timings, so payloads
    are checked once here and rejected if they don't qualify.

Wire Format:
    {"name": str, "entryType": "mark" | "measure", "startTime": number,
     "duration": number, "detail": any (optional), "isBase": bool}
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .errors import ValidationError


class EntryType(str, Enum):
    """Kind of performance entry, mirroring the Performance API names."""

    MARK = "mark"
    MEASURE = "measure"


@dataclass(frozen=True)
class PerformanceLogEntry:
    """
    A single performance measurement reported by the instrumented process.

    Instances are frozen: once an entry is admitted to a buffer it is
    never modified.

    Attributes:
        name: Identifier of the measured span (e.g. a module path).
        entry_type: Whether this is a point-in-time mark or a measure.
        start_time: Timestamp in the process's monotonic clock units.
        duration: Elapsed time, never negative.
        detail: Opaque payload passed through untouched.
        is_base: Marks a baseline row for display. No effect on ingestion.
    """
    name: str
    entry_type: EntryType
    start_time: float
    duration: float
    detail: Optional[Any] = None
    is_base: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Return the entry in its wire (camelCase) shape."""
        out = {
            "name": self.name,
            "entryType": self.entry_type.value,
            "startTime": self.start_time,
            "duration": self.duration,
            "isBase": self.is_base,
        }
        if self.detail is not None:
            out["detail"] = self.detail
        return out


def _number(payload: Dict[str, Any], key: str) -> float:
    """Fetch a required finite numeric field from a payload."""
    if key not in payload:
        raise ValidationError(key, "missing required field")
    value = payload[key]
    # bool is an int subclass but never a valid timing
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(key, "expected a number", value)
    if not math.isfinite(value):
        raise ValidationError(key, "expected a finite number", value)
    return float(value)


def parse_entry(payload: Any) -> PerformanceLogEntry:
    """
    Validate a raw event payload and build a PerformanceLogEntry.

    Args:
        payload: The decoded JSON object carried by a "measure" or
                 "JS_require_start" event. An existing entry is passed
                 through unchanged.

    Returns:
        PerformanceLogEntry: The validated, immutable entry.

    Raises:
        ValidationError: If a required field is missing or has the wrong
                         type, or the duration is negative.

    Example:
        >>> parse_entry({"name": "app.js", "entryType": "measure",
        ...              "startTime": 12.5, "duration": 3, "isBase": False})
        PerformanceLogEntry(name='app.js', entry_type=<EntryType.MEASURE: 'measure'>, ...)

    Note:
        A missing "isBase" defaults to False since it only affects how
        the row is drawn.
    """
    if isinstance(payload, PerformanceLogEntry):
        return payload
    if not isinstance(payload, dict):
        raise ValidationError(None, "expected a JSON object", payload)

    name = payload.get("name")
    if not isinstance(name, str):
        raise ValidationError("name", "expected a string", name)

    raw_type = payload.get("entryType")
    try:
        entry_type = EntryType(raw_type)
    except ValueError:
        raise ValidationError("entryType", "expected 'mark' or 'measure'", raw_type)

    start_time = _number(payload, "startTime")
    duration = _number(payload, "duration")
    if duration < 0:
        raise ValidationError("duration", "must not be negative", duration)

    is_base = payload.get("isBase", False)
    if not isinstance(is_base, bool):
        raise ValidationError("isBase", "expected a boolean", is_base)

    return PerformanceLogEntry(
        name=name,
        entry_type=entry_type,
        start_time=start_time,
        duration=duration,
        detail=payload.get("detail"),
        is_base=is_base,
    )
