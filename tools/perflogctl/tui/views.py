"""
Curses-based live panel for performance logs.

This module contains the main rendering loop for the performance log
panel. It combines the feed watcher and a PerfLogSession to display a
live, pausable table of timing entries in the terminal.

Purpose:
    While profiling module loading, developers want to watch timings
    arrive, freeze the stream to read it, and wipe the table between
    runs. The panel gives them that without leaving the terminal.

Architecture:
    - Background thread: Polls the feed file via FeedWatcher
    - Main thread: Feeds queued messages to the session and renders
    - Communication: Thread-safe queue between producer and consumer

Keys:
    p / space  pause or resume (only while connected)
    c          clear the table (only while connected)
    up / down  move the row selection
    end / esc  drop the selection and follow new rows
    q          quit
"""

import curses
import threading
import time
from pathlib import Path
from queue import Empty, Queue
from typing import Optional

from ..core.session import PerfLogSession
from ..utils.store import LogStore
from .columns import create_column_config, format_header, format_row
from .model import CONNECT, DISCONNECT
from .tailer import FeedWatcher


def _draw(stdscr, y: int, text: str, width: int, attr: int = 0) -> None:
    """Draw a line, ignoring the curses error raised at the bottom-right cell."""
    try:
        stdscr.addstr(y, 0, text[: max(0, width - 1)], attr)
    except curses.error:
        pass


def footer_text(connected: bool, paused: bool, backlog: int = 0, skipped: int = 0,
                diagnostic: str = "") -> str:
    """
    Build the panel's bottom line.

    Key hints come first, then feed counters when non-zero, then the
    newest diagnostic line from the session log.
    """
    hints = "q quit  ↑/↓ select  esc follow"
    if connected:
        verb = "resume" if paused else "pause"
        hints = f"p {verb}  c clear  " + hints
    if backlog or skipped:
        hints += f"  (backlog {backlog}, skipped {skipped})"
    if diagnostic:
        hints += f"  | {diagnostic}"
    return hints


def run_panel(stdscr, feed: Path, limit: int, store: Optional[LogStore] = None) -> None:
    """
    Run the interactive performance log panel.

    Args:
        stdscr: The curses standard screen object (provided by curses.wrapper).
        feed: Path to the event feed file to watch.
        limit: Maximum number of rows retained by the session.
        store: Optional LogStore the rows are restored from and mirrored to.

    Side Effects:
        - Creates a background thread for feed tailing
        - Writes diagnostics to the session log
        - Takes over the terminal until the user presses 'q' or Ctrl+C

    Note:
        This function should be called via curses.wrapper() to ensure
        proper terminal setup and cleanup.
    """
    curses.curs_set(0)
    stdscr.nodelay(True)
    stdscr.keypad(True)

    # --- Runtime state ---
    running = True
    log_queue: Queue = Queue(maxsize=2000)
    watcher = FeedWatcher(feed, log_queue)
    session = PerfLogSession(connection=watcher.is_attached, limit=limit, store=store)
    columns = create_column_config()

    # Selected row index, or None while following the tail
    view = {"selected": None}

    def clear_selection() -> None:
        view["selected"] = None

    def clamp_selection(length: int) -> None:
        if view["selected"] is not None and view["selected"] >= length:
            view["selected"] = length - 1 if length else None

    session.on_clear_selection(clear_selection)
    session.subscribe_rows(clamp_selection)
    session.notify_activate()

    def tail_loop():
        """Background thread: poll the feed and push messages to the queue."""
        while running:
            watcher.tick()
            time.sleep(0.25)

    thread = threading.Thread(target=tail_loop, daemon=True)
    thread.start()
    session.notify_ready()

    diagnostic = ""
    frame = 0
    while running:
        rows = session.get_rows()
        connected = session.is_connected()

        # --- Input ---
        ch = stdscr.getch()
        if ch in (ord("q"), ord("Q"), 3):
            running = False
            break
        if connected and ch in (ord("p"), ord("P"), ord(" ")):
            session.toggle_pause()
        elif connected and ch in (ord("c"), ord("C")):
            session.clear_logs()
        elif ch == curses.KEY_UP and len(rows):
            current = view["selected"]
            view["selected"] = max(0, (len(rows) if current is None else current) - 1)
        elif ch == curses.KEY_DOWN and view["selected"] is not None:
            view["selected"] = min(len(rows) - 1, view["selected"] + 1)
        elif ch in (curses.KEY_END, 27):
            clear_selection()

        # --- Drain the queue into the session, in arrival order ---
        try:
            while True:
                message = log_queue.get_nowait()
                if message.event == CONNECT:
                    session.notify_connect()
                elif message.event == DISCONNECT:
                    session.notify_disconnect()
                else:
                    session.handle_message(message.event, message.payload)
        except Empty:
            pass

        # Re-read the newest diagnostic about once a second
        if frame % 20 == 0:
            last = session.logger.tail(1)
            diagnostic = last[0] if last else ""
        frame += 1

        # --- Render ---
        stdscr.erase()
        h, w = stdscr.getmaxyx()

        link = "connected" if connected else "disconnected"
        mode = "PAUSED" if session.get_pause_state() else "LIVE"
        _draw(stdscr, 0, f"perflogctl — {feed.name}  [{link}] [{mode}]  rows {len(rows)}/{limit}", w)
        _draw(stdscr, 1, format_header(columns, w - 1), w, curses.A_UNDERLINE)

        # Leave room for header (2 lines) and footer (1 line)
        visible = max(0, h - 3)
        selected = view["selected"]
        if selected is None:
            start = max(0, len(rows) - visible)
        else:
            # Keep the selected row on screen
            start = min(max(0, selected - visible + 1), max(0, len(rows) - visible))
        for offset, entry in enumerate(rows[start:start + visible]):
            index = start + offset
            attr = curses.A_REVERSE if index == selected else 0
            if entry.is_base:
                attr |= curses.A_BOLD
            _draw(stdscr, 2 + offset, format_row(entry, columns, w - 1), w, attr)

        _draw(stdscr, h - 1, footer_text(connected, session.get_pause_state(), watcher.backlog,
                                         watcher.tail.skipped, diagnostic), w)
        stdscr.refresh()

        # 50ms = ~20 FPS
        time.sleep(0.05)

    session.logger.info("panel", "Panel closed")
    # Allow tail thread to finish its current iteration before exiting
    time.sleep(0.1)
