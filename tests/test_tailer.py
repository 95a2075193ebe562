"""Tests for feed tailing and connection detection."""

import json
from queue import Queue

from perflogctl.core.gate import MEASURE_EVENT, SESSION_START_EVENT
from perflogctl.core.session import PerfLogSession
from perflogctl.tui.model import CONNECT, DISCONNECT
from perflogctl.tui.tailer import FeedTail, FeedWatcher


def write(path, *objs, raw=""):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        for obj in objs:
            f.write(json.dumps(obj) + "\n")
        f.write(raw)


def drain(queue):
    out = []
    while not queue.empty():
        out.append(queue.get_nowait())
    return out


def test_poll_reads_new_lines_only(tmp_path, payload):
    feed = tmp_path / "app.feed.jsonl"
    tail = FeedTail(feed)
    assert tail.poll() == []

    write(feed, {"event": "measure", "payload": payload(name="a")})
    first = tail.poll()
    assert [(m.event, m.payload["name"], m.seq) for m in first] == [("measure", "a", 1)]

    write(feed, {"event": "JS_require_start", "payload": payload(name="b")})
    assert [m.payload["name"] for m in tail.poll()] == ["b"]
    assert tail.poll() == []


def test_partial_line_held_until_complete(tmp_path):
    feed = tmp_path / "app.feed.jsonl"
    write(feed, raw='{"event": "measure", ')
    tail = FeedTail(feed)
    assert tail.poll() == []
    write(feed, raw='"payload": {}}\n')
    messages = tail.poll()
    assert len(messages) == 1
    assert messages[0].payload == {}


def test_garbage_lines_skipped(tmp_path):
    feed = tmp_path / "app.feed.jsonl"
    write(feed, {"payload": {}}, [1, 2], raw="not json\n\n")
    tail = FeedTail(feed)
    assert tail.poll() == []
    assert tail.skipped == 3


def test_truncation_restarts_from_top(tmp_path):
    feed = tmp_path / "app.feed.jsonl"
    write(feed, *({"event": "measure", "payload": {"n": i}} for i in range(3)))
    tail = FeedTail(feed)
    assert len(tail.poll()) == 3

    feed.write_text(json.dumps({"event": "measure", "payload": {"n": 9}}) + "\n")
    assert [m.payload for m in tail.poll()] == [{"n": 9}]


def test_watcher_reports_attach_and_detach(tmp_path):
    feed = tmp_path / "feeds" / "app.feed.jsonl"
    queue = Queue()
    watcher = FeedWatcher(feed, queue)
    assert watcher.attached is False

    write(feed, {"event": "measure", "payload": {}})
    watcher.tick()
    assert [m.event for m in drain(queue)] == [CONNECT, "measure"]

    watcher.tick()
    assert drain(queue) == []

    feed.unlink()
    watcher.tick()
    assert [m.event for m in drain(queue)] == [DISCONNECT]


def test_watcher_holds_back_when_queue_full(tmp_path):
    feed = tmp_path / "app.feed.jsonl"
    write(feed, *({"event": "measure", "payload": {"n": i}} for i in range(5)))
    queue = Queue(maxsize=2)
    watcher = FeedWatcher(feed, queue)
    watcher.tick()
    assert queue.qsize() == 2
    assert watcher.backlog == 3

    # New lines stay unread while the backlog is waiting
    offset = watcher.tail.offset
    write(feed, *({"event": "measure", "payload": {"n": i}} for i in range(5, 7)))
    watcher.tick()
    assert watcher.tail.offset == offset
    assert watcher.backlog == 3

    seen = []
    for _ in range(10):
        seen.extend(m.payload["n"] for m in drain(queue))
        watcher.tick()
    seen.extend(m.payload["n"] for m in drain(queue))
    assert seen == list(range(7))
    assert watcher.backlog == 0


def test_marker_survives_a_full_queue(tmp_path, link, payload):
    feed = tmp_path / "app.feed.jsonl"
    session = PerfLogSession(connection=link)
    session.handle_message(MEASURE_EVENT, payload(name="old"))

    write(feed, *({"event": MEASURE_EVENT, "payload": payload(name=f"m{i}")} for i in range(3)))
    write(feed, {"event": SESSION_START_EVENT, "payload": payload(name="M", entry_type="mark")})
    queue = Queue(maxsize=2)
    watcher = FeedWatcher(feed, queue)

    for _ in range(5):
        watcher.tick()
        for message in drain(queue):
            session.handle_message(message.event, message.payload)

    assert [e.name for e in session.get_rows()] == ["M"]
