# faber/sandbox/protocol.py
"""
Host <-> sandbox message protocol.

    {type: "LOAD_START"}
    {type: "READY", loadTimeMs: number}
    {type: "ERROR", error: string, kind?: string, details?: {line?, column?, stack?}}
    {type: "DEBUG", debugType: string, message: string, data?: any}

Anything else is a ProtocolError and gets dropped by the engine.
"""
import json
from typing import Any, Dict, Optional

from faber.core.types import BoundaryMessage, MessageType


ERROR_KINDS = ("compile", "runtime", "rejection", "resource", "timeout")
DETAIL_KEYS = ("line", "column", "stack", "componentStack")
UNKNOWN_ERROR = "Unknown error in preview"


class ProtocolError(ValueError):
    """Inbound message does not match the protocol."""
    pass


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def parse_message(raw: Any) -> BoundaryMessage:
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise ProtocolError(f"Message is not JSON: {e}")
    if not isinstance(raw, dict):
        raise ProtocolError(f"Message must be an object, got {type(raw).__name__}")

    try:
        kind = MessageType(raw.get("type"))
    except ValueError:
        raise ProtocolError(f"Unknown message type: {raw.get('type')!r}")

    if kind == MessageType.LOAD_START:
        return BoundaryMessage(kind)

    if kind == MessageType.READY:
        return BoundaryMessage(kind, {"loadTimeMs": _number(raw.get("loadTimeMs"))})

    if kind == MessageType.ERROR:
        error = raw.get("error")
        if not isinstance(error, str) or not error.strip():
            error = UNKNOWN_ERROR
        details = raw.get("details") if isinstance(raw.get("details"), dict) else {}
        error_kind = raw.get("kind") if raw.get("kind") in ERROR_KINDS else "runtime"
        return BoundaryMessage(kind, {
            "error": error,
            "kind": error_kind,
            "details": {k: details[k] for k in DETAIL_KEYS if details.get(k) is not None},
        })

    return BoundaryMessage(kind, {
        "debugType": str(raw.get("debugType") or "log"),
        "message": str(raw.get("message") or ""),
        "data": raw.get("data"),
    })


# ═══════════════════════════════════════════════════════════════════════════════
# BUILDERS
# ═══════════════════════════════════════════════════════════════════════════════

def load_start() -> Dict[str, Any]:
    return {"type": MessageType.LOAD_START.value}


def ready(load_time_ms: float) -> Dict[str, Any]:
    return {"type": MessageType.READY.value, "loadTimeMs": load_time_ms}


def error(message: str, kind: str = "runtime", **details: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"type": MessageType.ERROR.value, "error": message, "kind": kind}
    if details:
        payload["details"] = details
    return payload


def debug(message: str, debug_type: str = "log", data: Any = None) -> Dict[str, Any]:
    return {"type": MessageType.DEBUG.value, "debugType": debug_type, "message": message, "data": data}
