"""
TUI (Text User Interface) components for perflogctl.

This subpackage provides the curses-based live panel and the feed
plumbing that keeps it supplied with events.

Modules:
    - views: Main curses rendering loop and panel layout
    - tailer: Real-time feed tailing and connection detection
    - columns: Column layout and row formatting
    - feed_index: Feed discovery
    - model: Messages passed from the tailer thread to the panel

Architecture:
    The TUI uses a producer-consumer pattern:
    1. FeedWatcher polls the feed file in a background thread
    2. Messages cross a bounded queue in arrival order
    3. The main curses loop hands them to the PerfLogSession and renders

Usage:
    The panel is typically launched via the CLI:
        python -m perflogctl watch myapp
"""
