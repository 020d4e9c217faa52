# tests/test_protocol.py
"""
Host <-> sandbox message parsing.
"""
import json

import pytest

from faber.core.types import MessageType
from faber.sandbox import protocol
from faber.sandbox.protocol import ProtocolError, UNKNOWN_ERROR, parse_message


def test_load_start():
    assert parse_message({"type": "LOAD_START"}).type == MessageType.LOAD_START


def test_ready_from_json_text():
    message = parse_message(json.dumps({"type": "READY", "loadTimeMs": 42}))
    assert message.type == MessageType.READY
    assert message.payload == {"loadTimeMs": 42.0}


def test_ready_with_bad_time_keeps_none():
    assert parse_message({"type": "READY", "loadTimeMs": "fast"}).payload["loadTimeMs"] is None
    assert parse_message({"type": "READY", "loadTimeMs": True}).payload["loadTimeMs"] is None


def test_error_details_are_filtered():
    message = parse_message({
        "type": "ERROR",
        "error": "Unexpected token (3:4)",
        "kind": "compile",
        "details": {"line": 3, "column": 4, "stack": None, "secret": "x"},
    })
    assert message.payload == {
        "error": "Unexpected token (3:4)",
        "kind": "compile",
        "details": {"line": 3, "column": 4},
    }


def test_error_defaults():
    message = parse_message({"type": "ERROR", "error": "   ", "kind": "weird"})
    assert message.payload["error"] == UNKNOWN_ERROR
    assert message.payload["kind"] == "runtime"
    assert message.payload["details"] == {}


def test_debug_defaults():
    message = parse_message({"type": "DEBUG"})
    assert message.payload == {"debugType": "log", "message": "", "data": None}


@pytest.mark.parametrize("raw", [
    "not json",
    b"{",
    [],
    42,
    {"type": "HELLO"},
    {"no": "type"},
])
def test_malformed_messages_raise(raw):
    with pytest.raises(ProtocolError):
        parse_message(raw)


def test_builders_parse_back():
    assert parse_message(protocol.load_start()).type == MessageType.LOAD_START
    assert parse_message(protocol.ready(12)).payload["loadTimeMs"] == 12.0
    error = parse_message(protocol.error("Boom", kind="runtime", line=1))
    assert error.payload["details"] == {"line": 1}
    debug = parse_message(protocol.debug("hi", debug_type="console.log", data=[1]))
    assert debug.payload == {"debugType": "console.log", "message": "hi", "data": [1]}
    assert debug.to_dict()["type"] == "DEBUG"
