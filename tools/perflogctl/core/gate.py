"""
Pause-gated admission of events into the log buffer.

The IngestionGate decides, event by event, whether an entry reaches the
buffer. It owns the pause flag and the session reset that happens when
the instrumented process starts a new module-load cycle.

Routing:
    - "measure": appended while active, silently dropped while paused
    - "JS_require_start": always clears the buffer, invalidates any
      selection, then appends the marker as the first entry

Pause State Machine:
    Paused --toggle (connected)----> Active
    Paused --toggle (disconnected)-> Paused   (no-op)
    Active --toggle----------------> Paused

    The initial state is Active when the source is already connected
    at construction time, otherwise Paused.
"""

from typing import Callable, Optional

from .buffer import LogBuffer
from .model import PerformanceLogEntry

# Event names sent by the instrumented process
MEASURE_EVENT = "measure"
SESSION_START_EVENT = "JS_require_start"

EVENT_KINDS = (MEASURE_EVENT, SESSION_START_EVENT)


class PauseState:
    """Single boolean flag controlling whether measures are admitted."""

    def __init__(self, paused: bool = True):
        self.paused = paused

    def __repr__(self) -> str:
        return f"PauseState(paused={self.paused})"


class IngestionGate:
    """
    Classify incoming events and route them into a LogBuffer.

    Attributes:
        buffer: The LogBuffer receiving admitted entries.
        state: The PauseState gating "measure" events.

    Example:
        >>> gate = IngestionGate(LogBuffer(), is_connected=lambda: True)
        >>> gate.paused
        False
        >>> gate.deliver("measure", entry)
        True
    """

    def __init__(
        self,
        buffer: LogBuffer,
        is_connected: Callable[[], bool],
        clear_selection: Optional[Callable[[], None]] = None,
    ):
        """
        Create a gate in front of a buffer.

        Args:
            buffer: Where admitted entries are stored.
            is_connected: Callable reporting the external connection state. Read
                          at construction and on every toggle.
            clear_selection: Called whenever the buffer is cleared, so a
                             presentation layer can drop row selections
                             that point at positions which no longer exist.
        """
        self.buffer = buffer
        self.is_connected = is_connected
        self.clear_selection = clear_selection
        # Start collecting immediately only if something is attached
        self.state = PauseState(paused=not is_connected())

    @property
    def paused(self) -> bool:
        return self.state.paused

    def toggle(self) -> bool:
        """
        Flip between paused and active.

        Resuming requires a connected source; without one the state stays
        paused. Pausing always succeeds.

        Returns:
            bool: The paused flag after the call.
        """
        if self.state.paused and self.is_connected():
            self.state.paused = False
        else:
            self.state.paused = True
        return self.state.paused

    def admit_measure(self, entry: PerformanceLogEntry) -> bool:
        """
        Append a measure entry unless paused.

        Returns:
            bool: True if the entry was appended, False if dropped.
        """
        if self.state.paused:
            return False
        self.buffer.append(entry)
        return True

    def clear(self) -> None:
        """Empty the buffer and invalidate the external selection."""
        self.buffer.clear()
        if self.clear_selection is not None:
            self.clear_selection()

    def reset_session(self, marker: PerformanceLogEntry) -> None:
        """
        Start a new session anchored on the marker entry.

        Clears the buffer and selection, then records the marker as the
        first entry. Runs regardless of the pause state.
        """
        self.clear()
        self.buffer.append(marker)

    def deliver(self, kind: str, entry: PerformanceLogEntry) -> bool:
        """
        Route a validated entry according to its event kind.

        Args:
            kind: MEASURE_EVENT or SESSION_START_EVENT.
            entry: The validated entry carried by the event.

        Returns:
            bool: True if the entry ended up in the buffer.

        Raises:
            KeyError: If kind is not a known event name.
        """
        if kind == MEASURE_EVENT:
            return self.admit_measure(entry)
        if kind == SESSION_START_EVENT:
            self.reset_session(entry)
            return True
        raise KeyError(kind)
