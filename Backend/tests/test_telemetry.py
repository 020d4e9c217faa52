# tests/test_telemetry.py
"""
Telemetry log: bounded, ordered, append-only, no authority.
"""
import re
from concurrent.futures import ThreadPoolExecutor

import pytest

from faber.telemetry import TelemetryLog, classify, describe_for_user


def test_events_keep_order():
    log = TelemetryLog(max_events=10)
    log.info("first")
    log.warning("second")
    log.error("third", {"kind": "compile"}, source="sandbox")
    assert [e.message for e in log.events()] == ["first", "second", "third"]
    assert log.events()[-1].source == "sandbox"


def test_oldest_events_are_evicted():
    log = TelemetryLog(max_events=3)
    for i in range(5):
        log.debug(f"event {i}")
    assert len(log) == 3
    assert [e.message for e in log.events()] == ["event 2", "event 3", "event 4"]


def test_events_returns_a_snapshot():
    log = TelemetryLog()
    log.info("one")
    snapshot = log.events()
    log.info("two")
    assert len(snapshot) == 1


def test_unknown_level_rejected():
    with pytest.raises(ValueError):
        TelemetryLog().record("fatal", "nope")


def test_invalid_bound_rejected():
    with pytest.raises(ValueError):
        TelemetryLog(max_events=0)


def test_clear():
    log = TelemetryLog()
    log.info("x")
    log.clear()
    assert log.events() == []


def test_timeline_format_and_limit():
    log = TelemetryLog()
    log.info("Preview session started")
    log.debug("console output", source="sandbox")
    log.error("Boom", {"kind": "runtime"}, source="sandbox")

    lines = log.timeline(limit=2)
    assert len(lines) == 2
    assert re.match(r"^\d{2}:\d{2}:\d{2}\.\d{3} DEBUG   \[sandbox\] console output$", lines[0])
    assert lines[1].endswith("ERROR   [sandbox] Boom")
    assert log.timeline(limit=0) == []
    assert len(log.timeline()) == 3


@pytest.mark.parametrize("key,expected", [
    ("compile", "blocking"),
    ("runtime", "blocking"),
    ("timeout", "blocking"),
    ("DISALLOWED_IMPORT", "blocking"),
    ("DANGEROUS_CODE", "blocking"),
    ("UNBALANCED_BRACES", "blocking"),
    ("HARDCODED_COLOR", "informational"),
    ("MISSING_ALT", "informational"),
    ("ANY_TYPE", "informational"),
    ("debug", "informational"),
])
def test_classify(key, expected):
    assert classify(key) == expected


def test_blocking_events_only_include_blocking_errors():
    log = TelemetryLog()
    log.error("compile failed", {"kind": "compile"})
    log.error("style nit", {"code": "INLINE_STYLE"})
    log.warning("slow", {"kind": "timeout"})
    log.error("no detail")
    assert [e.message for e in log.blocking_events()] == ["compile failed"]


def test_describe_for_user():
    assert "too long" in describe_for_user("timeout")
    assert describe_for_user("something-new")


def test_concurrent_writers_stay_bounded():
    log = TelemetryLog(max_events=100)
    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(lambda i: log.info(f"event {i}"), range(400)))
    assert len(log) == 100


def test_to_dict_shape():
    event = TelemetryLog().info("hello", {"a": 1})
    data = event.to_dict()
    assert set(data) == {"timestamp", "level", "message", "detail", "source"}
    assert data["level"] == "info"
