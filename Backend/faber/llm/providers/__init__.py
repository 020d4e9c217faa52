# faber/llm/providers/__init__.py
"""
LLM Providers - Individual provider implementations.
"""
from . import openai, ollama

__all__ = ["openai", "ollama"]
