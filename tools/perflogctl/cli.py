#!/usr/bin/env python3
"""
perflogctl - Live performance log panel for instrumented processes.

This module implements the command-line interface for perflogctl,
providing commands to watch an event feed live, replay a feed through a
session, write test events, and inspect the persisted log store.

Responsibilities:
    - Watch a feed in a live, pausable curses panel (watch)
    - Replay a feed through a session and print the table (dump)
    - Append a hand-made event to a feed (emit)
    - List known feeds (feeds)
    - Print or clear the persisted "logs" store (store)

Design Philosophy:
    The instrumented process and the panel only share a file. The
    process appends one JSON event per line to its feed; the feed
    existing is what "connected" means. Nothing else is required to
    run or debug the panel.

Usage:
    python -m perflogctl <command> [options]

Examples:
    python -m perflogctl watch myapp --persist
    python -m perflogctl dump myapp --limit 1000
    python -m perflogctl emit myapp --event JS_require_start --name main.js
    python -m perflogctl feeds
    python -m perflogctl store --clear
"""

import argparse
import datetime
import json
import os
import sys
from pathlib import Path
from typing import Optional

from .core.buffer import DEFAULT_LIMIT
from .core.gate import EVENT_KINDS, MEASURE_EVENT
from .core.session import PerfLogSession
from .tui.columns import create_column_config, format_header, format_row
from .tui.feed_index import discover_feeds
from .tui.tailer import FeedTail
from .tui.views import run_panel
from .utils.paths import feed_path
from .utils.store import LogStore

# Width used for table output outside the TUI
TABLE_WIDTH = 100

# ============================================================
# Environment Configuration
# ============================================================

def load_dotenv(env_path: Optional[Path] = None) -> None:
    """
    Load a .env file from the current directory into os.environ if present.

    Existing environment variables win over values from the file. The
    current directory is used rather than the package location so an
    installed console script reads the project's .env, not one next to
    site-packages.

    Args:
        env_path: Explicit file to load instead of ./.env.

    Note:
        We implement our own .env loading rather than using python-dotenv
        to avoid adding an external dependency for a simple feature.
    """
    env_path = env_path or Path.cwd() / ".env"

    if not env_path.exists():
        return

    with env_path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            # Split on first = only (value might contain =)
            key, value = line.split("=", 1)
            os.environ.setdefault(key, value)


def default_limit() -> int:
    """
    Return the row limit used when --limit isn't given.

    Reads PERFLOG_LIMIT, falling back to DEFAULT_LIMIT when it is unset
    or not a positive integer.
    """
    raw = os.environ.get("PERFLOG_LIMIT")
    try:
        value = int(raw) if raw else DEFAULT_LIMIT
    except ValueError:
        return DEFAULT_LIMIT
    return value if value > 0 else DEFAULT_LIMIT


def positive_int(text: str) -> int:
    """argparse type for strictly positive integers."""
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return value

# ============================================================
# Commands
# ============================================================

def emit_event(feed: Path, event: str, payload: dict) -> None:
    """
    Append one event line to a feed file.

    Creates the feed (and so "connects" the source) if it doesn't exist.

    Args:
        feed: Path to the feed file.
        event: Event kind, e.g. "measure".
        payload: Entry payload in wire format.
    """
    feed.parent.mkdir(parents=True, exist_ok=True)
    line = json.dumps({"event": event, "payload": payload}, ensure_ascii=False)
    with feed.open("a", encoding="utf-8") as f:
        f.write(line + "\n")


def print_rows(rows) -> None:
    """Print rows as a plain text table."""
    columns = create_column_config()
    print(format_header(columns, TABLE_WIDTH))
    print("-" * TABLE_WIDTH)
    for entry in rows:
        print(format_row(entry, columns, TABLE_WIDTH))


def dump_feed(args) -> PerfLogSession:
    """
    Replay a whole feed through a fresh session and print the result.

    This is the non-TUI counterpart of `watch`: every event currently
    in the feed is delivered once, in order, with the same pause and
    session-reset rules the panel applies.

    Args:
        args: Namespace with 'feed', 'limit' and 'paused' attributes.

    Returns:
        PerfLogSession: The session after replay, for callers that want
        to inspect it further.
    """
    feed = feed_path(args.feed)
    session = PerfLogSession(connection=feed.exists, limit=args.limit)
    if args.paused and not session.get_pause_state():
        session.toggle_pause()

    tail = FeedTail(feed)
    received = admitted = 0
    for message in tail.poll():
        received += 1
        if session.handle_message(message.event, message.payload):
            admitted += 1

    print(f"[perflogctl] Replayed feed: {feed}")
    print(f"  events:   {received} ({tail.skipped} unreadable lines skipped)")
    print(f"  admitted: {admitted}")
    print(f"  rows:     {len(session.get_rows())}/{args.limit}")
    print(f"  paused:   {session.get_pause_state()}")
    print(f"  session:  {session.session_id}")
    print()
    print_rows(session.get_rows())
    return session


def emit_command(args) -> None:
    """Build a payload from CLI flags and append it to the feed."""
    feed = feed_path(args.feed)
    entry_type = args.entry_type or (
        "measure" if args.event == MEASURE_EVENT else "mark"
    )
    payload = {
        "name": args.name,
        "entryType": entry_type,
        "startTime": args.start,
        "duration": args.duration,
        "isBase": args.base,
    }
    if args.detail is not None:
        payload["detail"] = args.detail
    emit_event(feed, args.event, payload)
    print(f"[perflogctl] {args.event} -> {feed}")


def list_feeds(args) -> None:
    """Print the feeds found under the feeds directory."""
    feeds = discover_feeds()
    if not feeds:
        print("[perflogctl] No feeds found")
        return
    for feed in feeds:
        modified = datetime.datetime.fromtimestamp(feed["last_mtime"]).isoformat(timespec="seconds")
        print(f"{feed['name']:<32} {feed['size']:>10} bytes  {modified}")


def store_command(args) -> None:
    """Print or clear the persisted "logs" store."""
    store = LogStore("logs", max_entries=args.limit)
    if args.clear:
        store.clear()
        print(f"[perflogctl] Cleared store: {store.path}")
        return
    rows = store.load()
    print(f"[perflogctl] Store {store.path} ({len(rows)} rows)")
    print_rows(rows)

# ============================================================
# Command-Line Argument Parsing
# ============================================================

def build_parser() -> argparse.ArgumentParser:
    """
    Build and configure the top-level argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser ready to parse sys.argv.
    """
    parser = argparse.ArgumentParser(
        prog="perflogctl",
        description="Live performance log panel",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        required=True,
    )

    # --- watch: live panel ---
    watch_parser = subparsers.add_parser(
        "watch",
        help="Show a feed in the live, pausable log panel (TUI)",
    )
    watch_parser.add_argument("feed", help="Feed name or path to a .jsonl feed")
    watch_parser.add_argument("--limit", type=positive_int, default=default_limit(),
                              help="Maximum rows kept in the table")
    watch_parser.add_argument("--persist", action="store_true",
                              help='Restore from and mirror to the "logs" store')

    # --- dump: non-interactive replay ---
    dump_parser = subparsers.add_parser(
        "dump",
        help="Replay a feed through a session and print the table",
    )
    dump_parser.add_argument("feed", help="Feed name or path to a .jsonl feed")
    dump_parser.add_argument("--limit", type=positive_int, default=default_limit(),
                             help="Maximum rows kept in the table")
    dump_parser.add_argument("--paused", action="store_true",
                             help="Replay with ingestion paused (only session markers land)")

    # --- emit: write a test event ---
    emit_parser = subparsers.add_parser(
        "emit",
        help="Append an event to a feed",
    )
    emit_parser.add_argument("feed", help="Feed name or path to a .jsonl feed")
    emit_parser.add_argument("--event", choices=EVENT_KINDS, default=MEASURE_EVENT,
                             help="Event kind (default: measure)")
    emit_parser.add_argument("--name", required=True, help="Span name")
    emit_parser.add_argument("--entry-type", choices=["mark", "measure"],
                             help="Entry type (default depends on --event)")
    emit_parser.add_argument("--start", type=float, default=0.0,
                             help="Start time")
    emit_parser.add_argument("--duration", type=float, default=0.0,
                             help="Duration")
    emit_parser.add_argument("--base", action="store_true",
                             help="Mark as a baseline row")
    emit_parser.add_argument("--detail", type=json.loads, help="Detail payload as JSON")

    # --- feeds: discovery ---
    subparsers.add_parser("feeds", help="List known feeds")

    # --- store: persisted rows ---
    store_parser = subparsers.add_parser(
        "store",
        help='Print or clear the persisted "logs" store',
    )
    store_parser.add_argument("--clear", action="store_true",
                              help="Truncate the store")
    store_parser.add_argument("--limit", type=positive_int, default=default_limit(),
                              help="Maximum rows read back")

    return parser

# ============================================================
# Entry Point
# ============================================================

def main(argv=None) -> None:
    """
    Main entry point for the perflogctl CLI.

    This function:
    1. Loads environment configuration from .env
    2. Parses command-line arguments
    3. Dispatches to the appropriate command handler

    Exit Codes:
        0: Success
        1: Invalid command or error
    """
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "watch":
        import curses
        store = LogStore("logs", max_entries=args.limit) if args.persist else None
        try:
            curses.wrapper(run_panel, feed_path(args.feed), args.limit, store)
        except KeyboardInterrupt:
            pass
        sys.exit(0)

    if args.command == "dump":
        dump_feed(args)
        sys.exit(0)

    if args.command == "emit":
        emit_command(args)
        sys.exit(0)

    if args.command == "feeds":
        list_feeds(args)
        sys.exit(0)

    if args.command == "store":
        store_command(args)
        sys.exit(0)

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":
    main()
