# faber/sandbox/__init__.py
"""
Faber Studio - Sandboxed Preview
Isolated browser contexts that render generated components and report back
"""
from .document import build_preview_document
from .engine import PreviewEngine
from .preview_manager import PreviewManager
from .runtime import ExecutionContext, IsolatedRuntime, PlaywrightRuntime
from .session import PreviewSession

__all__ = [
    "build_preview_document",
    "ExecutionContext",
    "IsolatedRuntime",
    "PlaywrightRuntime",
    "PreviewEngine",
    "PreviewManager",
    "PreviewSession",
]
