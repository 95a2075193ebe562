"""Tests for the per-session diagnostic logger."""

import re

from perflogctl.utils.panellog import PanelLogger

LINE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z \[session=s1\] \[source=(\w+)\] (\w+) (.*)$"
)


def test_line_format():
    logger = PanelLogger("s1")
    logger.info("panel", "Paused")
    logger.warn("ingest", "Dropped measure")
    logger.error("store", "Write failed")
    parsed = [LINE.match(line).groups() for line in logger.tail()]
    assert parsed == [
        ("panel", "INFO", "Paused"),
        ("ingest", "WARN", "Dropped measure"),
        ("store", "ERROR", "Write failed"),
    ]


def test_level_is_upper_cased():
    logger = PanelLogger("s1")
    logger.log("panel", "debug", "x")
    assert " DEBUG x" in logger.tail()[0]


def test_tail_limits_lines():
    logger = PanelLogger("s1")
    for i in range(10):
        logger.info("panel", str(i))
    assert [line.rsplit(" ", 1)[1] for line in logger.tail(3)] == ["7", "8", "9"]


def test_tail_missing_file():
    logger = PanelLogger("s1")
    assert logger.tail() == []
