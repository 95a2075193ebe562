"""
Bounded, ordered storage for admitted log entries.

The LogBuffer holds the log history shown by the panel. It keeps entries
in arrival order and enforces a hard cap on how many are retained.

Design Decisions:
    - Backed by a deque with maxlen so eviction of the oldest entry is
      O(1) and happens as part of the append
    - Readers get a live read-only view rather than a copy; a copy is
      only made when snapshot() is called explicitly
    - Observers are told the new length after every mutation so the
      presentation layer can re-render or auto-scroll
    - No locking: the session delivers events from a single thread
"""

from collections import deque
from itertools import islice
from typing import Callable, Deque, Iterator, List

from .model import PerformanceLogEntry

# Default retention, matching the panel's historical row cap
DEFAULT_LIMIT = 200_000

LengthObserver = Callable[[int], None]


class LogBufferView:
    """
    Read-only, live view over a LogBuffer.

    The view never copies. Iterating, indexing or taking len() always
    reflects the buffer's current contents.
    """

    def __init__(self, items: Deque[PerformanceLogEntry]):
        self._items = items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[PerformanceLogEntry]:
        return iter(self._items)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._slice(index)
        return self._items[index]

    def _slice(self, index: slice) -> List[PerformanceLogEntry]:
        """Copy out only the sliced entries, walking from the nearer end."""
        size = len(self._items)
        start, stop, step = index.indices(size)
        if step != 1:
            return list(self._items)[index]
        if stop <= start:
            return []
        if start >= size - stop:
            # Tail windows (the panel's usual case) walk backwards
            tail = list(islice(reversed(self._items), size - stop, size - start))
            tail.reverse()
            return tail
        return list(islice(self._items, start, stop))

    def __repr__(self) -> str:
        return f"LogBufferView(len={len(self._items)})"


class LogBuffer:
    """
    Append-only log history with FIFO eviction at a fixed capacity.

    Attributes:
        limit: Maximum number of entries retained. When an append would
               exceed it, the oldest entry is dropped first.

    Example:
        >>> buf = LogBuffer(limit=3)
        >>> for e in (e1, e2, e3, e4):
        ...     buf.append(e)
        >>> buf.snapshot()
        [e2, e3, e4]
    """

    def __init__(self, limit: int = DEFAULT_LIMIT):
        """
        Create an empty buffer.

        Args:
            limit: Maximum number of retained entries. Must be positive.

        Raises:
            ValueError: If limit is not a positive integer.
        """
        if limit <= 0:
            raise ValueError("limit must be positive")
        self.limit = limit
        # maxlen makes the deque discard from the left on overflow
        self._items: Deque[PerformanceLogEntry] = deque(maxlen=limit)
        self._observers: List[LengthObserver] = []

    def append(self, entry: PerformanceLogEntry) -> None:
        """
        Add an entry at the tail, evicting the oldest entry if full.

        Args:
            entry: The entry to store.

        Side Effects:
            Notifies length observers with the new length.
        """
        self._items.append(entry)
        self._notify()

    def clear(self) -> None:
        """Remove every entry and notify observers."""
        self._items.clear()
        self._notify()

    def read(self) -> LogBufferView:
        """Return a live read-only view of the entries, oldest first."""
        return LogBufferView(self._items)

    def snapshot(self) -> List[PerformanceLogEntry]:
        """Return a copy of the current entries, oldest first."""
        return list(self._items)

    def length(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def subscribe(self, observer: LengthObserver) -> Callable[[], None]:
        """
        Register a callback invoked with the new length after each change.

        Args:
            observer: Callable taking the buffer length.

        Returns:
            A zero-argument function that removes the observer again.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        size = len(self._items)
        # Copy so observers may unsubscribe while being notified
        for observer in list(self._observers):
            observer(size)
