"""
Diagnostic logging for panel sessions.

This module provides the plain text logger each panel session writes its
diagnostics to: rejected events, pause toggles, clears and connection
changes. Every session gets its own append-only file so a run can be
inspected after the panel has exited.

Design Decisions:
    - One log file per session for easier correlation
    - Append-only writes to prevent data loss
    - Human-readable format with timestamps and structured fields
    - UTC timestamps for consistency across machines
"""

from __future__ import annotations

import datetime
from pathlib import Path

from .paths import session_dir


def session_log_path(session_id: str) -> Path:
    """
    Resolve the diagnostic log file path for a panel session.

    Args:
        session_id: The unique identifier of the session.

    Returns:
        Path: Absolute path to the session's perflogctl.log file.

    Example:
        >>> session_log_path("abc-123")
        PosixPath('/home/user/.../logs/sessions/abc-123/perflogctl.log')
    """
    return session_dir(session_id) / "perflogctl.log"


class PanelLogger:
    """
    Minimal append-only session logger.

    Attributes:
        session_id: The session being logged.
        path: The filesystem path to the log file.

    Log Line Format:
        <timestamp> [session=<id>] [source=<source>] <LEVEL> <message>

    Example:
        >>> logger = PanelLogger("abc-123")
        >>> logger.warn("ingest", "Dropped measure: invalid field 'duration'")
        # Writes: 2024-01-15T12:00:00Z [session=abc-123] [source=ingest] WARN Dropped measure: ...
    """

    def __init__(self, session_id: str) -> None:
        """
        Initialize a logger for a specific session.

        Creates the log directory if it doesn't exist, so the first
        write can't fail on a missing directory.

        Args:
            session_id: The unique identifier of the session to log.
        """
        self.session_id = session_id
        self.path = session_log_path(session_id)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _ts(self) -> str:
        """Return an ISO 8601 UTC timestamp like "2024-01-15T12:00:00Z"."""
        return (
            datetime.datetime.now(datetime.timezone.utc)
            .isoformat(timespec="seconds")
            .replace("+00:00", "Z")
        )

    def log(self, source: str, level: str, message: str) -> None:
        """
        Write a structured log line to the session's log file.

        Args:
            source: The component emitting the line (e.g. "ingest", "panel").
            level: The severity (e.g. "INFO", "WARN", "ERROR").
            message: The human-readable message.

        Side Effects:
            Appends a line to the session's log file.
        """
        line = (
            f"{self._ts()} "
            f"[session={self.session_id}] "
            f"[source={source}] "
            f"{level.upper()} {message}\n"
        )
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line)

    def info(self, source: str, message: str) -> None:
        self.log(source, "INFO", message)

    def warn(self, source: str, message: str) -> None:
        self.log(source, "WARN", message)

    def error(self, source: str, message: str) -> None:
        self.log(source, "ERROR", message)

    def tail(self, max_lines: int = 8) -> list[str]:
        """
        Return the last lines written to this session's log.

        Missing or unreadable files yield an empty list; the panel footer
        should never crash because of its own diagnostics.
        """
        if not self.path.exists():
            return []
        try:
            text = self.path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return []
        return text.splitlines()[-max_lines:]
