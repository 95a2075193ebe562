"""Tests for PerfLogSession: control surface, validation and hooks."""

from perflogctl.core.gate import MEASURE_EVENT, SESSION_START_EVENT
from perflogctl.core.session import PerfLogSession
from perflogctl.utils.panellog import PanelLogger, session_log_path
from perflogctl.utils.store import LogStore


def log_text(session):
    return session.logger.path.read_text(encoding="utf-8")


def test_session_log_location(link, perflog_root):
    session = PerfLogSession(connection=link, session_id="abc")
    assert session.logger.path == session_log_path("abc")
    assert session.logger.path == perflog_root / "sessions" / "abc" / "perflogctl.log"
    assert "Session started limit=200000 paused=False" in log_text(session)


def test_initial_pause_follows_connection(link):
    assert PerfLogSession(connection=link).get_pause_state() is False
    link.connected = False
    assert PerfLogSession(connection=link).get_pause_state() is True


def test_is_connected_is_live(link):
    session = PerfLogSession(connection=link)
    link.connected = False
    assert session.is_connected() is False


def test_measures_admitted_while_active(link, payload):
    session = PerfLogSession(connection=link)
    for i in range(3):
        assert session.handle_message(MEASURE_EVENT, payload(name=f"m{i}")) is True
    assert [e.name for e in session.get_rows()] == ["m0", "m1", "m2"]


def test_measures_dropped_while_paused(link, payload):
    session = PerfLogSession(connection=link)
    session.toggle_pause()
    for _ in range(3):
        assert session.handle_message(MEASURE_EVENT, payload()) is False
    assert len(session.get_rows()) == 0
    assert "Paused" in log_text(session)


def test_marker_resets_rows_even_when_paused(link, payload):
    session = PerfLogSession(connection=link)
    session.handle_message(MEASURE_EVENT, payload(name="E1"))
    session.handle_message(MEASURE_EVENT, payload(name="E2"))
    session.toggle_pause()
    assert session.handle_message(SESSION_START_EVENT, payload(name="M", entry_type="mark"))
    rows = session.get_rows()
    assert len(rows) == 1
    assert rows[0].name == "M"
    assert session.get_pause_state() is True


def test_resume_while_disconnected_is_logged_noop(link):
    link.connected = False
    session = PerfLogSession(connection=link)
    session.toggle_pause()
    assert session.get_pause_state() is True
    assert "Resume ignored: source not connected" in log_text(session)


def test_invalid_payload_dropped_and_logged(link, payload):
    session = PerfLogSession(connection=link)
    assert session.handle_message(MEASURE_EVENT, payload(duration="slow")) is False
    assert len(session.get_rows()) == 0
    assert "WARN Dropped measure: invalid field 'duration'" in log_text(session)


def test_invalid_marker_does_not_reset(link, payload):
    session = PerfLogSession(connection=link)
    session.handle_message(MEASURE_EVENT, payload())
    assert session.handle_message(SESSION_START_EVENT, {"name": "M"}) is False
    assert len(session.get_rows()) == 1


def test_unknown_event_kind_dropped(link, payload):
    session = PerfLogSession(connection=link)
    assert session.handle_message("paint", payload()) is False
    assert "unknown kind 'paint'" in log_text(session)


def test_clear_logs_runs_selection_hooks(link, payload):
    session = PerfLogSession(connection=link)
    cleared = []
    session.on_clear_selection(lambda: cleared.append(True))
    session.handle_message(MEASURE_EVENT, payload())
    session.clear_logs()
    assert len(session.get_rows()) == 0
    assert cleared == [True]


def test_marker_runs_selection_hooks(link, payload):
    session = PerfLogSession(connection=link)
    cleared = []
    session.on_clear_selection(lambda: cleared.append(True))
    session.handle_message(SESSION_START_EVENT, payload(name="M"))
    assert cleared == [True]


def test_row_observers(link, payload):
    session = PerfLogSession(connection=link, limit=2)
    lengths = []
    session.subscribe_rows(lengths.append)
    for _ in range(3):
        session.handle_message(MEASURE_EVENT, payload())
    assert lengths == [1, 2, 2]


def test_lifecycle_hooks(link):
    session = PerfLogSession(connection=link)
    fired = []
    session.on_connect(lambda: fired.append("connect"))
    session.on_disconnect(lambda: fired.append("disconnect"))
    session.on_activate(lambda: fired.append("activate"))
    session.on_ready(lambda: fired.append("ready"))
    session.notify_activate()
    session.notify_ready()
    session.notify_disconnect()
    session.notify_connect()
    assert fired == ["activate", "ready", "disconnect", "connect"]


def test_sessions_are_independent(link, payload):
    first = PerfLogSession(connection=link)
    second = PerfLogSession(connection=link)
    first.handle_message(MEASURE_EVENT, payload())
    assert len(second.get_rows()) == 0
    assert first.session_id != second.session_id


def test_explicit_logger(link, payload):
    logger = PanelLogger("shared")
    session = PerfLogSession(connection=link, logger=logger)
    session.handle_message(MEASURE_EVENT, None)
    assert session.logger is logger
    assert "Dropped measure: invalid payload" in logger.path.read_text(encoding="utf-8")


class TestStoreMirror:
    def test_rows_mirrored_and_restored(self, link, payload):
        store = LogStore("logs")
        session = PerfLogSession(connection=link, store=store)
        session.handle_message(MEASURE_EVENT, payload(name="a"))
        session.handle_message(MEASURE_EVENT, payload(name="b"))

        restored = PerfLogSession(connection=link, store=LogStore("logs"))
        assert [e.name for e in restored.get_rows()] == ["a", "b"]

    def test_restore_respects_limit(self, link, payload):
        session = PerfLogSession(connection=link, store=LogStore("logs"))
        for i in range(5):
            session.handle_message(MEASURE_EVENT, payload(name=str(i)))
        restored = PerfLogSession(connection=link, limit=2, store=LogStore("logs"))
        assert [e.name for e in restored.get_rows()] == ["3", "4"]

    def test_marker_truncates_store(self, link, payload):
        store = LogStore("logs")
        session = PerfLogSession(connection=link, store=store)
        session.handle_message(MEASURE_EVENT, payload(name="old"))
        session.handle_message(SESSION_START_EVENT, payload(name="M"))
        assert [e.name for e in store.load()] == ["M"]

    def test_clear_truncates_store(self, link, payload):
        store = LogStore("logs")
        session = PerfLogSession(connection=link, store=store)
        session.handle_message(MEASURE_EVENT, payload())
        session.clear_logs()
        assert store.load() == []

    def test_dropped_measures_not_mirrored(self, link, payload):
        store = LogStore("logs")
        session = PerfLogSession(connection=link, store=store)
        session.toggle_pause()
        session.handle_message(MEASURE_EVENT, payload())
        assert store.load() == []

    def test_store_write_failure_is_logged(self, link, payload, monkeypatch):
        store = LogStore("logs")
        session = PerfLogSession(connection=link, store=store)

        def fail(*args):
            raise OSError("disk full")

        monkeypatch.setattr(store, "append", fail)
        assert session.handle_message(MEASURE_EVENT, payload(name="a")) is True
        assert [e.name for e in session.get_rows()] == ["a"]
        assert "[source=store] ERROR Store append failed: disk full" in log_text(session)

    def test_store_clear_failure_is_logged(self, link, payload, monkeypatch):
        store = LogStore("logs")
        session = PerfLogSession(connection=link, store=store)
        session.handle_message(MEASURE_EVENT, payload(name="old"))

        def fail(*args):
            raise OSError("read-only")

        monkeypatch.setattr(store, "clear", fail)
        assert session.handle_message(SESSION_START_EVENT, payload(name="M", entry_type="mark"))
        session.clear_logs()
        assert len(session.get_rows()) == 0
        assert log_text(session).count("ERROR Store clear failed: read-only") == 2
