# faber/llm/__init__.py
"""
LLM module - Unified interface for code generation providers.
"""
from .adapter import LLMGenerator

__all__ = ["LLMGenerator"]
