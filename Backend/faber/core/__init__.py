# faber/core/__init__.py
"""
Core module - configuration, exceptions and shared types.
"""
from .config import settings, Settings
from .exceptions import (
    FaberError,
    ExtractionFailure,
    ValidationFailure,
    ServiceUnavailable,
    LLMError,
    RateLimitError,
    SandboxError,
    SandboxCompileError,
    SandboxRuntimeError,
    SandboxTimeout,
)
from .types import (
    GeneratedFile,
    ExtractionResult,
    ValidationIssue,
    ValidationResult,
    ValidationFix,
    GenerationAttempt,
    GenerationOutcome,
    BoundaryMessage,
    MessageType,
    SessionStatus,
    Severity,
)

__all__ = [
    # Config
    "settings",
    "Settings",
    # Exceptions
    "FaberError",
    "ExtractionFailure",
    "ValidationFailure",
    "ServiceUnavailable",
    "LLMError",
    "RateLimitError",
    "SandboxError",
    "SandboxCompileError",
    "SandboxRuntimeError",
    "SandboxTimeout",
    # Types
    "GeneratedFile",
    "ExtractionResult",
    "ValidationIssue",
    "ValidationResult",
    "ValidationFix",
    "GenerationAttempt",
    "GenerationOutcome",
    "BoundaryMessage",
    "MessageType",
    "SessionStatus",
    "Severity",
]
