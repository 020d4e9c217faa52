# faber/sandbox/session.py
"""
Preview session - one execution attempt for one source version.

State machine:
    loading --READY--------> success
    loading --ERROR/timeout-> error

Transition methods return False when the session is already terminal, so
each session gets exactly one terminal transition no matter how many
messages race in.
"""
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from faber.core.exceptions import (
    SandboxCompileError,
    SandboxError,
    SandboxRuntimeError,
    SandboxTimeout,
)
from faber.core.types import GeneratedFile, SessionStatus


ERROR_TYPES = {
    "compile": SandboxCompileError,
    "runtime": SandboxRuntimeError,
    "rejection": SandboxRuntimeError,
    "resource": SandboxRuntimeError,
    "timeout": SandboxTimeout,
}


@dataclass
class PreviewSession:
    session_id: str
    version: int
    source_files: Tuple[GeneratedFile, ...]
    retry_count: int = 0
    status: SessionStatus = SessionStatus.LOADING
    error: Optional[str] = None
    error_kind: Optional[str] = None
    error_details: Dict[str, Any] = field(default_factory=dict)
    load_time_ms: Optional[int] = None
    superseded: bool = False
    started_at: float = field(default_factory=time.monotonic)
    load_started_at: Optional[float] = None

    @property
    def terminal(self) -> bool:
        return self.status != SessionStatus.LOADING

    def mark_load_started(self) -> None:
        if self.load_started_at is None:
            self.load_started_at = time.monotonic()

    def elapsed_ms(self) -> int:
        """Host-side load time, measured from LOAD_START when the page sent one."""
        start = self.load_started_at if self.load_started_at is not None else self.started_at
        return max(1, int(round((time.monotonic() - start) * 1000)))

    def succeed(self, load_time_ms: Optional[float] = None) -> bool:
        if self.terminal or self.superseded:
            return False
        if load_time_ms is None or load_time_ms <= 0:
            load_time_ms = self.elapsed_ms()
        self.status = SessionStatus.SUCCESS
        self.load_time_ms = max(1, int(round(load_time_ms)))
        return True

    def fail(self, message: str, kind: str = "runtime", details: Optional[Dict[str, Any]] = None) -> bool:
        if self.terminal or self.superseded:
            return False
        self.status = SessionStatus.ERROR
        self.error = message or "Unknown error in preview"
        self.error_kind = kind
        self.error_details = dict(details or {})
        return True

    def as_exception(self) -> Optional[SandboxError]:
        """The failure as a typed exception, or None when not in error."""
        if self.status != SessionStatus.ERROR:
            return None
        error_type = ERROR_TYPES.get(self.error_kind or "runtime", SandboxRuntimeError)
        return error_type(self.session_id, self.error, {"kind": self.error_kind, **self.error_details})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "version": self.version,
            "status": self.status.value,
            "error": self.error,
            "errorKind": self.error_kind,
            "errorDetails": self.error_details,
            "loadTimeMs": self.load_time_ms,
            "retryCount": self.retry_count,
            "superseded": self.superseded,
            "files": [f.path for f in self.source_files],
        }
