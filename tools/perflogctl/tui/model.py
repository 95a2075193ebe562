"""
Data models for the TUI feed pipeline.

This module defines the message type passed from the background feed
watcher to the panel's main loop.

Purpose:
    The watcher thread must not touch the session directly; it only
    reads the feed file and queues what it finds. FeedMessage is the
    unit that crosses that queue.

Note:
    Connection changes travel through the same queue as events so the
    main loop sees them in the order they were observed.
"""

from dataclasses import dataclass
from typing import Any

# Pseudo-event kinds emitted by the watcher, never by the feed itself
CONNECT = "__connect__"
DISCONNECT = "__disconnect__"


@dataclass
class FeedMessage:
    """
    One message read from an event feed.

    Attributes:
        event: Event kind ("measure", "JS_require_start") or one of the
               CONNECT / DISCONNECT pseudo-events.
        payload: The decoded entry payload, None for pseudo-events.
        seq: Sequence number within the tail session.
    """
    event: str
    payload: Any
    seq: int
