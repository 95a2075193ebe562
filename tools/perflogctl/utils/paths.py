"""
Filesystem path definitions for perflogctl.

This module defines the canonical locations used by perflogctl for event
feeds, per-session diagnostic logs and persisted stores. All path logic
is centralized here so the CLI, the panel and the tests agree on layout.

Layout:
    <root>/feeds/<name>.feed.jsonl      event feeds written by the process
    <root>/sessions/<id>/perflogctl.log diagnostic log per panel session
    <root>/stores/<name>.jsonl          persisted stores (e.g. "logs")

Design Decisions:
    - All functions return pathlib.Path objects for cross-platform compatibility
    - The root comes from PERFLOG_ROOT so tests and CI can redirect it
    - Without PERFLOG_ROOT, paths resolve under ./logs in the current
      directory, so an installed perflogctl never writes into its own
      install location
"""

import os
from pathlib import Path

# Filename suffix identifying an event feed
FEED_SUFFIX = ".feed.jsonl"


def log_root() -> Path:
    """
    Return the root directory for all perflogctl data.

    Uses the PERFLOG_ROOT environment variable if set, otherwise
    falls back to a logs/ directory under the current working directory.

    Returns:
        Path: Root directory for feeds, sessions and stores.

    Example:
        >>> os.environ["PERFLOG_ROOT"] = "/tmp/perflog"
        >>> log_root()
        PosixPath('/tmp/perflog')
    """
    root = os.environ.get("PERFLOG_ROOT")
    if root:
        return Path(root)
    return Path.cwd() / "logs"


def feed_dir() -> Path:
    """Return the directory that holds event feed files."""
    return log_root() / "feeds"


def feed_path(name: str) -> Path:
    """
    Resolve a feed name to its file path.

    Anything that already looks like a path (contains a separator or
    ends with .jsonl) is returned as-is, so the CLI accepts both
    "myapp" and "./somewhere/myapp.feed.jsonl".

    Args:
        name: Feed name or explicit path.

    Returns:
        Path: The feed file location.

    Example:
        >>> feed_path("myapp")
        PosixPath('/tmp/perflog/feeds/myapp.feed.jsonl')
    """
    if os.sep in name or name.endswith(".jsonl"):
        return Path(name)
    return feed_dir() / f"{name}{FEED_SUFFIX}"


def session_dir(session_id: str) -> Path:
    """Return the directory holding diagnostics for one panel session."""
    return log_root() / "sessions" / session_id


def store_path(name: str) -> Path:
    """
    Return the file backing a named persistent store.

    Args:
        name: Store name, "logs" for the mirrored log rows.

    Returns:
        Path: Location of the store's JSONL file.
    """
    return log_root() / "stores" / f"{name}.jsonl"
