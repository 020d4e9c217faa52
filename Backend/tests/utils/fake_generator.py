# backend/tests/utils/fake_generator.py
"""
Scripted generation collaborator.
"""
import asyncio
import json
from typing import Any, Dict, List, Optional

from faber.core.exceptions import LLMError


def json_response(content: str, path: str = "src/App.tsx", explanation: str = "Generated component") -> Dict[str, str]:
    """A provider response whose text is the JSON contract."""
    body = {"files": [{"path": path, "content": content}], "explanation": explanation}
    return {"content": json.dumps(body)}


class ScriptedGenerator:
    """
    Returns queued responses in order. Exceptions in the queue are raised.
    An empty queue raises LLMError.
    """

    def __init__(self, *responses: Any, delay: float = 0.0):
        self.responses = list(responses)
        self.delay = delay
        self.calls: List[Dict[str, Any]] = []

    async def generate(self, prompt: str, params: Optional[Dict[str, Any]] = None, system_prompt: str = "") -> Any:
        self.calls.append({"prompt": prompt, "params": dict(params or {}), "system_prompt": system_prompt})
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.responses:
            raise LLMError("fake", "No scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response
