# faber/core/types.py
"""
Shared data model for the generation pipeline.

Every type exposes ``to_dict()`` producing the camelCase wire shape used by
the HTTP surface and the sandbox protocol.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class SessionStatus(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class MessageType(str, Enum):
    LOAD_START = "LOAD_START"
    READY = "READY"
    ERROR = "ERROR"
    DEBUG = "DEBUG"


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class GeneratedFile:
    """One generated source file."""
    path: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "content": self.content}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratedFile":
        return cls(path=str(data.get("path", "")), content=str(data.get("content", "")))


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of one extraction attempt. Never mutated after creation."""
    files: Tuple[GeneratedFile, ...] = ()
    has_valid_code: bool = False
    method: str = "failed"
    explanation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": [f.to_dict() for f in self.files],
            "explanation": self.explanation,
            "hasValidCode": self.has_valid_code,
            "method": self.method,
        }


@dataclass
class ValidationIssue:
    file: str
    line: int
    column: int
    message: str
    severity: Severity
    code: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "message": self.message,
            "severity": self.severity.value,
            "code": self.code,
        }


@dataclass
class ValidationResult:
    """
    Validation verdict for a file set.

    ``is_valid`` is derived from ``errors`` so the two can never disagree.
    """
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    score: int = 100
    suggestions: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def issues(self) -> List[ValidationIssue]:
        return self.errors + self.warnings

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": [i.to_dict() for i in self.errors],
            "warnings": [i.to_dict() for i in self.warnings],
            "score": self.score,
            "suggestions": list(self.suggestions),
        }


@dataclass
class ValidationFix:
    file: str
    type: str  # "auto-import" | "format"
    description: str
    applied: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "type": self.type,
            "description": self.description,
            "applied": self.applied,
        }


@dataclass
class GenerationAttempt:
    """One rung of the escalation ladder, private to a single run."""
    strategy_index: int
    strategy: str
    prompt: str
    extraction: ExtractionResult
    validation: Optional[ValidationResult] = None
    failure: Optional[str] = None
    timestamp: str = field(default_factory=utc_now)

    @property
    def accepted(self) -> bool:
        return self.failure is None and self.extraction.has_valid_code


@dataclass
class GenerationOutcome:
    """Final result of an escalation run. ``success`` is always True."""
    files: List[GeneratedFile]
    explanation: Optional[str]
    validation_score: int
    extraction_method: str
    strategy: str
    fallback_used: bool
    attempts: int
    escalation_reasons: List[str] = field(default_factory=list)
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "files": [f.to_dict() for f in self.files],
            "explanation": self.explanation,
            "validationScore": self.validation_score,
            "extractionMethod": self.extraction_method,
            "strategy": self.strategy,
            "fallbackUsed": self.fallback_used,
            "attempts": self.attempts,
            "escalationReasons": list(self.escalation_reasons),
        }


@dataclass
class BoundaryMessage:
    """A message exchanged between the host and one sandboxed context."""
    type: MessageType
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, **self.payload}
