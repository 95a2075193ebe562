"""
Per-session state for the performance log panel.

A PerfLogSession is what a host creates when the panel opens. It owns
the log buffer and the ingestion gate, checks every inbound payload at
the boundary, and exposes the small control surface the presentation
layer drives (rows, pause toggle, clear, connection state).

Purpose:
    Nothing about a session lives at module level. Two panels watching
    two processes get two independent sessions, and closing a panel
    discards its buffer with it.

Error Policy:
    Inbound events never raise back to the event source. Malformed
    payloads and unknown event kinds are logged as WARN diagnostics and
    dropped. Failures writing the persisted store are logged as ERROR.
"""

import uuid
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from ..utils.panellog import PanelLogger
from .buffer import DEFAULT_LIMIT, LengthObserver, LogBuffer, LogBufferView
from .errors import ValidationError
from .gate import EVENT_KINDS, MEASURE_EVENT, IngestionGate
from .model import parse_entry

if TYPE_CHECKING:  # pragma: no cover - store imports core.model
    from ..utils.store import LogStore

Hook = Callable[[], None]


class PerfLogSession:
    """
    The core of one panel session.

    Attributes:
        session_id: Identifier used for the diagnostic log.
        buffer: The bounded log history.
        gate: The pause-gated router in front of the buffer.
        logger: Where diagnostics are written.
        store: Optional persisted mirror of the rows.

    Example:
        >>> session = PerfLogSession(connection=lambda: True)
        >>> session.handle_message("measure", {"name": "a.js", "entryType": "measure",
        ...                                    "startTime": 1.0, "duration": 2.0, "isBase": False})
        True
        >>> len(session.get_rows())
        1
    """

    def __init__(
        self,
        connection: Callable[[], bool],
        limit: int = DEFAULT_LIMIT,
        logger: Optional[PanelLogger] = None,
        store: Optional["LogStore"] = None,
        session_id: Optional[str] = None,
    ):
        """
        Create a session.

        Args:
            connection: Zero-argument callable returning whether the
                        instrumented process is attached.
            limit: Maximum number of rows retained.
            logger: Diagnostic logger. One is created for the session
                    if not given.
            store: Optional LogStore. When given, its rows are restored
                   into the buffer and every later change is mirrored.
            session_id: Explicit identifier, a UUID4 by default.
        """
        self.session_id = session_id or str(uuid.uuid4())
        self.logger = logger or PanelLogger(self.session_id)
        self.store = store
        self._connection = connection

        # Hook registries; the host fires these, nothing here depends on them
        self._connect_hooks: List[Hook] = []
        self._disconnect_hooks: List[Hook] = []
        self._activate_hooks: List[Hook] = []
        self._ready_hooks: List[Hook] = []
        self._selection_hooks: List[Hook] = []

        self.buffer = LogBuffer(limit)
        if store is not None:
            for entry in store.load():
                self.buffer.append(entry)

        self.gate = IngestionGate(
            self.buffer,
            is_connected=self.is_connected,
            clear_selection=self._invalidate_selection,
        )
        self.logger.info(
            "session",
            f"Session started limit={limit} paused={self.gate.paused} "
            f"restored={len(self.buffer)}",
        )

    # ============================================================
    # Outbound control surface
    # ============================================================

    def get_rows(self) -> LogBufferView:
        """Return the live, read-only view of the rows, oldest first."""
        return self.buffer.read()

    def get_pause_state(self) -> bool:
        return self.gate.paused

    def is_connected(self) -> bool:
        return bool(self._connection())

    def toggle_pause(self) -> None:
        """
        Pause or resume ingestion of measure events.

        Resuming while disconnected leaves the session paused.
        """
        was_paused = self.gate.paused
        paused = self.gate.toggle()
        if was_paused and paused:
            self.logger.info("panel", "Resume ignored: source not connected")
        else:
            self.logger.info("panel", "Paused" if paused else "Resumed")

    def clear_logs(self) -> None:
        """Empty the rows and invalidate any selection, without a marker."""
        self.gate.clear()
        self._mirror("clear")
        self.logger.info("panel", "Logs cleared")

    def subscribe_rows(self, observer: LengthObserver) -> Callable[[], None]:
        """Register a row-count observer. Returns an unsubscribe function."""
        return self.buffer.subscribe(observer)

    # ============================================================
    # Inbound event feed
    # ============================================================

    def handle_message(self, kind: str, payload: Any) -> bool:
        """
        Process one event from the instrumented process.

        Args:
            kind: "measure" or "JS_require_start".
            payload: The event's entry payload.

        Returns:
            bool: True if an entry was added to the rows.
        """
        if kind not in EVENT_KINDS:
            self.logger.warn("ingest", f"Dropped event of unknown kind {kind!r}")
            return False

        try:
            entry = parse_entry(payload)
        except ValidationError as exc:
            self.logger.warn("ingest", f"Dropped {kind}: {exc}")
            return False

        admitted = self.gate.deliver(kind, entry)
        if kind != MEASURE_EVENT:
            self.logger.info("ingest", f"New session marker {entry.name!r}, rows reset")
            self._mirror("clear")
        if admitted:
            self._mirror("append", entry)
        return admitted

    def _mirror(self, action: str, *args: Any) -> None:
        """
        Apply a row change to the persisted store, if there is one.

        Store failures are logged as ERROR and never reach the caller;
        the in-memory rows stay authoritative.
        """
        if self.store is None:
            return
        try:
            getattr(self.store, action)(*args)
        except OSError as exc:
            self.logger.error("store", f"Store {action} failed: {exc}")

    # ============================================================
    # Lifecycle hooks
    # ============================================================

    def on_connect(self, hook: Hook) -> None:
        self._connect_hooks.append(hook)

    def on_disconnect(self, hook: Hook) -> None:
        self._disconnect_hooks.append(hook)

    def on_activate(self, hook: Hook) -> None:
        self._activate_hooks.append(hook)

    def on_ready(self, hook: Hook) -> None:
        self._ready_hooks.append(hook)

    def on_clear_selection(self, hook: Hook) -> None:
        """Register a callback run whenever the rows are cleared."""
        self._selection_hooks.append(hook)

    def notify_connect(self) -> None:
        self.logger.info("connection", "Source connected")
        self._fire(self._connect_hooks)

    def notify_disconnect(self) -> None:
        self.logger.info("connection", "Source disconnected")
        self._fire(self._disconnect_hooks)

    def notify_activate(self) -> None:
        self._fire(self._activate_hooks)

    def notify_ready(self) -> None:
        self._fire(self._ready_hooks)

    def _invalidate_selection(self) -> None:
        self._fire(self._selection_hooks)

    @staticmethod
    def _fire(hooks: List[Hook]) -> None:
        for hook in list(hooks):
            hook()
