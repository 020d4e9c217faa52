# faber/generation/__init__.py
"""
Generation - prompt planning, the escalation ladder and its fallback.
"""
from .fallback import synthesize_fallback
from .ladder import (
    DEFAULT_STRATEGIES,
    EscalationController,
    GenerationOptions,
    Strategy,
    plan_primary,
    plan_retry,
)
from .progress import GENERATION_STEPS, ProgressTracker

__all__ = [
    "DEFAULT_STRATEGIES",
    "EscalationController",
    "GenerationOptions",
    "GENERATION_STEPS",
    "ProgressTracker",
    "Strategy",
    "plan_primary",
    "plan_retry",
    "synthesize_fallback",
]
