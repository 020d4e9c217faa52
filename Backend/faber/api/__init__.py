# faber/api/__init__.py
"""
API module - All route handlers.
"""
from . import health, validation, generation, preview

__all__ = [
    "health",
    "validation",
    "generation",
    "preview",
]
