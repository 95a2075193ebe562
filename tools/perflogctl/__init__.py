"""
perflogctl - Live performance log panel for instrumented processes.

This package receives performance timing events (marks and measures)
from an instrumented process and keeps them in a bounded, pausable log
that is shown as a live table in the terminal.

Package Structure:
    - cli.py: Command-line interface and entry point
    - core/: Log buffer, ingestion gate and session state
    - tui/: Live panel and feed tailing
    - utils/: Paths, diagnostic logging and the persisted store

Usage:
    Run as a module: python -m perflogctl <command>

Example:
    python -m perflogctl watch myapp --persist
"""

__version__ = "0.1.0"
