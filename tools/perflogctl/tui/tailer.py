"""
Real-time tailing of event feed files.

This module provides the classes that watch a feed file written by the
instrumented process and turn each appended line into a FeedMessage.

Purpose:
    The instrumented process appends one JSON object per event to its
    feed file. The FeedWatcher polls that file from a background thread
    and queues messages for the panel, which is the only place events
    reach the session.

Feed Line Format:
    {"event": "measure", "payload": {"name": ..., "entryType": ..., ...}}

Design Decisions:
    - Uses polling rather than inotify for cross-platform simplicity
    - Handles file truncation/replacement gracefully
    - Buffers partial lines to handle incomplete writes
    - Treats the feed file's existence as the connection state
    - Never drops messages; a full queue holds back further reads
"""

import json
from collections import deque
from pathlib import Path
from queue import Full, Queue
from typing import Deque, List

from .model import CONNECT, DISCONNECT, FeedMessage


class FeedTail:
    """
    Tail a single feed file and emit FeedMessage objects for new lines.

    Tracks the file offset and polls for new content. Handles file
    truncation, partial lines, and encoding errors.

    Attributes:
        path: Path to the feed file being tailed.
        offset: Current read position in the file.
        partial: Incomplete line buffer (line without trailing newline).
        seq: Sequence counter for emitted messages.
        skipped: Number of lines that could not be decoded as events.

    Example:
        >>> tail = FeedTail(Path("logs/feeds/myapp.feed.jsonl"))
        >>> messages = tail.poll()  # Returns new messages since last poll
    """

    def __init__(self, path: Path):
        self.path = path
        # Track where we left off reading in the file
        self.offset = 0
        # Buffer for incomplete lines that don't end with newline yet
        self.partial = ""
        self.seq = 0
        self.skipped = 0

    def _read_new_lines(self) -> List[str]:
        """Read new complete lines from the file since last poll."""
        # Feed might not exist yet if the process hasn't attached
        if not self.path.exists():
            return []

        size = self.path.stat().st_size

        # Detect truncation or replacement (process restarted the feed)
        if size < self.offset:
            self.offset = 0
            self.partial = ""

        if size == self.offset:
            return []

        with self.path.open("rb") as f:
            f.seek(self.offset)
            data = f.read()
            self.offset += len(data)

        # Decode bytes to string, replacing any invalid UTF-8 sequences
        text = self.partial + data.decode("utf-8", errors="replace")

        lines = text.splitlines(keepends=False)

        # If the chunk doesn't end with newline, last line is incomplete
        if not text.endswith("\n"):
            self.partial = lines.pop() if lines else ""
        else:
            self.partial = ""

        return lines

    def poll(self) -> List[FeedMessage]:
        """
        Read new messages from the feed since the last poll.

        Lines that are not JSON objects with a string "event" field are
        counted in ``skipped`` and otherwise ignored. Payload validation
        is left to the session.

        Returns:
            List[FeedMessage]: New messages, in file order.
        """
        messages = []
        for line in self._read_new_lines():
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                self.skipped += 1
                continue
            if not isinstance(obj, dict) or not isinstance(obj.get("event"), str):
                self.skipped += 1
                continue

            self.seq += 1
            messages.append(FeedMessage(
                event=obj["event"],
                payload=obj.get("payload"),
                seq=self.seq,
            ))

        return messages


class FeedWatcher:
    """
    Watch one feed file for connection changes and new events.

    Nothing read from the feed is ever discarded. When the queue is full,
    messages wait in ``pending`` and the feed is not read again until
    they have all been queued, so a slow panel applies back-pressure to
    the watcher instead of losing session markers.

    Attributes:
        path: The feed file.
        out_queue: Queue receiving FeedMessage objects.
        tail: The FeedTail reading the file.
        attached: Connection state seen at the last tick.
        pending: Messages read but not yet queued, oldest first.

    Example:
        >>> queue = Queue()
        >>> watcher = FeedWatcher(Path("logs/feeds/myapp.feed.jsonl"), queue)
        >>> while True:
        ...     watcher.tick()
        ...     time.sleep(0.25)
    """

    def __init__(self, path: Path, out_queue: Queue):
        self.path = path
        self.out_queue = out_queue
        self.tail = FeedTail(path)
        self.attached = self.is_attached()
        self.pending: Deque[FeedMessage] = deque()

    def is_attached(self) -> bool:
        """Return whether the instrumented process currently has a feed."""
        return self.path.exists()

    @property
    def backlog(self) -> int:
        """Number of messages waiting for room in the queue."""
        return len(self.pending)

    def tick(self) -> None:
        """
        Poll once for connection changes and new feed lines.

        Should be called periodically (e.g., every 250ms) in a background
        thread.

        Side Effects:
            Pushes FeedMessage objects to the output queue, in the order
            they were observed.
        """
        attached = self.is_attached()
        if attached != self.attached:
            self.attached = attached
            self.pending.append(FeedMessage(
                event=CONNECT if attached else DISCONNECT,
                payload=None,
                seq=self.tail.seq,
            ))

        # Only read more of the feed once the backlog has drained
        if self._flush():
            self.pending.extend(self.tail.poll())
            self._flush()

    def _flush(self) -> bool:
        """Move pending messages into the queue. True if all fit."""
        while self.pending:
            try:
                # Non-blocking so a slow UI never stalls the watcher thread
                self.out_queue.put_nowait(self.pending[0])
            except Full:
                return False
            self.pending.popleft()
        return True
