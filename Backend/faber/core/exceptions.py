# faber/core/exceptions.py
"""
Custom exceptions for the application.
"""
from typing import Optional, Dict, Any, List


class FaberError(Exception):
    """Base exception for all Faber errors."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ExtractionFailure(FaberError):
    """No strategy produced a structurally valid file."""
    pass


class ValidationFailure(FaberError):
    """Error-severity validation issues block acceptance."""
    def __init__(self, issues: List[Any], score: int = 0):
        codes = sorted({getattr(i, "code", str(i)) for i in issues})
        super().__init__(
            f"Validation failed with {len(issues)} error(s): {', '.join(codes)}",
            {"codes": codes, "score": score}
        )
        self.issues = issues
        self.score = score


class ServiceUnavailable(FaberError):
    """A collaborator (generator, validator) could not be reached."""
    def __init__(self, service: str, message: str):
        super().__init__(
            f"{service} unavailable: {message}",
            {"service": service}
        )
        self.service = service


class LLMError(FaberError):
    """LLM provider error."""
    def __init__(self, provider: str, message: str):
        super().__init__(
            f"LLM error ({provider}): {message}",
            {"provider": provider}
        )
        self.provider = provider


class RateLimitError(LLMError):
    """Provider answered 429."""
    def __init__(self, provider: str):
        super().__init__(provider, "Rate limited (429)")


class SandboxError(FaberError):
    """Preview sandbox error."""
    kind = "runtime"

    def __init__(self, session_id: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, {"session_id": session_id, **(details or {})})
        self.session_id = session_id


class SandboxCompileError(SandboxError):
    """Source failed to transpile inside the sandbox."""
    kind = "compile"


class SandboxRuntimeError(SandboxError):
    """Uncaught exception, unhandled rejection or resource-load failure."""
    kind = "runtime"


class SandboxTimeout(SandboxError):
    """Neither READY nor ERROR arrived in time."""
    kind = "timeout"
