"""
Utility modules for perflogctl.

This subpackage contains shared utilities used across perflogctl:

Modules:
    - paths: Filesystem layout for feeds, sessions and stores
    - panellog: Per-session diagnostic logging
    - store: Persisted mirror of the log rows

Purpose:
    These utilities are separated from the CLI and the core to:
    - Avoid circular imports
    - Enable reuse across different CLI commands and TUI components
    - Keep path and logging logic centralized and testable
"""
