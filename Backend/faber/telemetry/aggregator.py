# faber/telemetry/aggregator.py
"""
Telemetry Aggregator - bounded, append-only event log.

ONE RESPONSIBILITY:
    Remember the most recent N events in order and render them.

INVARIANTS:
1. Append-only (no updates, no deletes except by eviction or clear())
2. Bounded (oldest events drop off first)
3. No control-flow authority (callers read it, it never decides)
"""
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import RLock
from typing import Any, Deque, Dict, List, Optional

from faber.core.logging import log


LEVELS = ("debug", "info", "warning", "error")

# Failure kinds and issue codes that stop a result from being usable
BLOCKING = {
    "compile",
    "runtime",
    "rejection",
    "resource",
    "timeout",
    "DISALLOWED_IMPORT",
    "DANGEROUS_CODE",
    "PLACEHOLDER_CODE",
    "MISSING_ENTRY",
    "MISSING_EXPORT",
    "MISSING_RETURN",
    "UNBALANCED_BRACES",
    "UNBALANCED_PARENS",
    "NO_FILES",
}

USER_MESSAGES = {
    "compile": "The generated code has a syntax error and could not be compiled.",
    "runtime": "The component crashed while rendering.",
    "rejection": "An asynchronous operation in the component failed.",
    "resource": "The preview runtime could not load a required resource.",
    "timeout": "The preview took too long to load.",
    "generation": "Code generation failed; a fallback result is shown instead.",
    "validation": "The generated code has issues that need attention.",
}


@dataclass
class TelemetryEvent:
    level: str
    message: str
    detail: Optional[Dict[str, Any]] = None
    source: str = "host"
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level,
            "message": self.message,
            "detail": self.detail,
            "source": self.source,
        }


def classify(code_or_kind: str) -> str:
    """`blocking` for compile/structural/security failures, else `informational`."""
    return "blocking" if code_or_kind in BLOCKING else "informational"


def describe_for_user(kind: str) -> str:
    return USER_MESSAGES.get(kind, "Something went wrong while preparing the preview.")


class TelemetryLog:
    """Most-recent-N ordered event log."""

    def __init__(self, max_events: int = 200, scope: str = "TELEMETRY"):
        if max_events < 1:
            raise ValueError("max_events must be positive")
        self.max_events = max_events
        self.scope = scope
        self._events: Deque[TelemetryEvent] = deque(maxlen=max_events)
        self._lock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    # ─────────────────────────────────────────────────────────
    # Recording
    # ─────────────────────────────────────────────────────────

    def record(
        self,
        level: str,
        message: str,
        detail: Optional[Dict[str, Any]] = None,
        source: str = "host",
    ) -> TelemetryEvent:
        if level not in LEVELS:
            raise ValueError(f"Unknown telemetry level: {level}")
        event = TelemetryEvent(level=level, message=message, detail=detail, source=source)
        with self._lock:
            self._events.append(event)
        log(self.scope, f"[{level}] {message}", detail)
        return event

    def debug(self, message: str, detail: Optional[Dict[str, Any]] = None, source: str = "host") -> TelemetryEvent:
        return self.record("debug", message, detail, source)

    def info(self, message: str, detail: Optional[Dict[str, Any]] = None, source: str = "host") -> TelemetryEvent:
        return self.record("info", message, detail, source)

    def warning(self, message: str, detail: Optional[Dict[str, Any]] = None, source: str = "host") -> TelemetryEvent:
        return self.record("warning", message, detail, source)

    def error(self, message: str, detail: Optional[Dict[str, Any]] = None, source: str = "host") -> TelemetryEvent:
        return self.record("error", message, detail, source)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    # ─────────────────────────────────────────────────────────
    # Reading
    # ─────────────────────────────────────────────────────────

    def events(self) -> List[TelemetryEvent]:
        with self._lock:
            return list(self._events)

    def blocking_events(self) -> List[TelemetryEvent]:
        """Error events whose detail names a blocking kind or code."""
        blocking = []
        for event in self.events():
            if event.level != "error":
                continue
            key = (event.detail or {}).get("kind") or (event.detail or {}).get("code")
            if key and classify(key) == "blocking":
                blocking.append(event)
        return blocking

    def timeline(self, limit: Optional[int] = None) -> List[str]:
        """Render the newest `limit` events as `HH:MM:SS.mmm LEVEL [source] message` lines."""
        events = self.events()
        if limit is not None:
            events = events[-limit:] if limit > 0 else []
        lines = []
        for event in events:
            stamp = event.timestamp.strftime("%H:%M:%S.") + f"{event.timestamp.microsecond // 1000:03d}"
            lines.append(f"{stamp} {event.level.upper():<7} [{event.source}] {event.message}")
        return lines
