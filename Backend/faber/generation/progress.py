# faber/generation/progress.py
"""
Weighted progress reporting for a generation run.

Steps and weights (sum to 100):
    analyze 10 -> plan 15 -> generate 50 -> validate 15 -> optimize 10
"""
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from faber.core.logging import log


GENERATION_STEPS: List[Tuple[str, int]] = [
    ("analyze", 10),
    ("plan", 15),
    ("generate", 50),
    ("validate", 15),
    ("optimize", 10),
]

# (step, percent, message)
ProgressCallback = Callable[[str, int, str], Awaitable[None]]


def _step_offsets() -> Dict[str, Tuple[int, int]]:
    offsets, start = {}, 0
    for name, weight in GENERATION_STEPS:
        offsets[name] = (start, weight)
        start += weight
    return offsets


STEP_OFFSETS = _step_offsets()


class ProgressTracker:
    """
    Converts (step, fraction) checkpoints into one percentage.

    The reported value never decreases and reaches exactly 100 on complete().
    """

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self.callback = callback
        self.percent = 0
        self.history: List[Tuple[str, int]] = []

    async def update(self, step: str, fraction: float = 1.0, message: str = "") -> int:
        if step not in STEP_OFFSETS:
            raise ValueError(f"Unknown progress step: {step}")
        start, weight = STEP_OFFSETS[step]
        fraction = max(0.0, min(1.0, fraction))
        # 100 is reserved for complete()
        percent = min(99, max(self.percent, int(start + weight * fraction)))
        return await self._emit(step, percent, message)

    async def complete(self, message: str = "Generation complete") -> int:
        return await self._emit("optimize", 100, message)

    async def _emit(self, step: str, percent: int, message: str) -> int:
        self.percent = percent
        self.history.append((step, percent))
        log("GENERATE", f"📊 {percent}% {step}: {message}" if message else f"📊 {percent}% {step}")
        if self.callback is not None:
            await self.callback(step, percent, message)
        return percent
