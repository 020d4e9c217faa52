# faber/extraction/__init__.py
"""
Extraction - normalize AI responses into generated files.
"""
from .extractor import (
    extract,
    is_structurally_valid,
    is_ui_bearing,
    response_text,
    STRATEGIES,
)

__all__ = [
    "extract",
    "is_structurally_valid",
    "is_ui_bearing",
    "response_text",
    "STRATEGIES",
]
