# faber/orchestration/__init__.py
"""
Orchestration - end-to-end generate + preview loop.
"""
from .studio import Studio, StudioResult

__all__ = ["Studio", "StudioResult"]
