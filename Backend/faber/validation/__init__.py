# faber/validation/__init__.py
"""
Validation - allowlist, safety, structure, style and accessibility checks.
"""
from .code_validator import CodeValidator, format_source
from .service import run_validation

__all__ = ["CodeValidator", "format_source", "run_validation"]
