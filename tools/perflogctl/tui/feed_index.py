"""
Feed discovery for the CLI and the panel.

This module lists the event feeds present under the feeds directory so a
developer can see which instrumented processes are (or were) reporting
without remembering feed names.
"""

from typing import Dict, List

from ..utils.paths import FEED_SUFFIX, feed_dir


def discover_feeds() -> List[Dict]:
    """
    Scan the feeds directory and return information about each feed.

    Returns:
        List[Dict]: One dictionary per feed, most recently modified
                   first. Each dictionary contains:
                   - name (str): Feed name (filename without suffix)
                   - path (Path): Full path to the feed file
                   - size (int): File size in bytes
                   - last_mtime (float): Last modification time

    Example:
        >>> discover_feeds()[0]
        {'name': 'myapp', 'path': PosixPath('.../myapp.feed.jsonl'), 'size': 2048, 'last_mtime': 1705320000.0}

    Note:
        Returns an empty list if the feeds directory doesn't exist.
    """
    feeds = []
    root = feed_dir()

    if not root.exists():
        return feeds

    for path in root.glob(f"*{FEED_SUFFIX}"):
        if not path.is_file():
            continue
        stat = path.stat()
        feeds.append({
            "name": path.name[: -len(FEED_SUFFIX)],
            "path": path,
            "size": stat.st_size,
            "last_mtime": stat.st_mtime,
        })

    # Active feeds are the ones written to most recently
    feeds.sort(key=lambda f: f["last_mtime"], reverse=True)

    return feeds
