"""Shared pytest fixtures for perflogctl tests."""

import pytest

from perflogctl.core.model import EntryType, PerformanceLogEntry


@pytest.fixture(autouse=True)
def perflog_root(tmp_path, monkeypatch):
    """Point every feed, session log and store at a temporary root."""
    root = tmp_path / "perflog"
    monkeypatch.setenv("PERFLOG_ROOT", str(root))
    monkeypatch.delenv("PERFLOG_LIMIT", raising=False)
    return root


@pytest.fixture
def make_entry():
    """Factory for PerformanceLogEntry objects with sensible defaults."""

    def _make(name="mod.js", entry_type=EntryType.MEASURE, start_time=0.0,
              duration=1.0, detail=None, is_base=False):
        return PerformanceLogEntry(
            name=name,
            entry_type=entry_type,
            start_time=start_time,
            duration=duration,
            detail=detail,
            is_base=is_base,
        )

    return _make


@pytest.fixture
def payload():
    """Factory for wire-format entry payloads."""

    def _payload(name="mod.js", entry_type="measure", start=0.0, duration=1.0, **extra):
        data = {
            "name": name,
            "entryType": entry_type,
            "startTime": start,
            "duration": duration,
            "isBase": False,
        }
        data.update(extra)
        return data

    return _payload


class Link:
    """Mutable stand-in for the host's connection state."""

    def __init__(self, connected=True):
        self.connected = connected

    def __call__(self):
        return self.connected


@pytest.fixture
def link():
    return Link(connected=True)
