# faber/llm/adapter.py
"""
Unified LLM adapter - the generation collaborator used by the ladder.

    generate(prompt, params{model, temperature, max_tokens}, system_prompt)
        -> {"content": str}

SINGLE EXECUTION: the escalation ladder decides whether to try again.
"""
from typing import Any, Dict, Optional

from faber.core.config import LLMSettings
from faber.core.exceptions import FaberError, LLMError
from faber.core.logging import log
from faber.llm.providers import ollama, openai


class LLMGenerator:
    """
    Provider dispatch for code generation.

    Typed Faber errors (LLMError, RateLimitError, ServiceUnavailable) pass
    through unchanged; anything else is wrapped in LLMError.
    """

    provider_map = {
        "openai": openai.call,
        "ollama": ollama.call,
    }

    def __init__(self, config: Optional[LLMSettings] = None):
        self.config = config or LLMSettings()

    async def generate(
        self,
        prompt: str,
        params: Optional[Dict[str, Any]] = None,
        system_prompt: str = "",
    ) -> Dict[str, str]:
        params = params or {}
        provider = params.get("provider") or self.config.default_provider
        model = params.get("model") or self.config.default_model

        call_func = self.provider_map.get(provider)
        if call_func is None:
            raise LLMError(provider, f"Unknown provider: {provider}")

        log("LLM", f"🤖 {provider}/{model} (temp={params.get('temperature')}, max_tokens={params.get('max_tokens')})")
        try:
            content = await call_func(
                prompt=prompt,
                system_prompt=system_prompt,
                model=model,
                temperature=params.get("temperature", 0.3),
                max_tokens=params.get("max_tokens", 4000),
                config=self.config,
            )
        except FaberError:
            raise
        except Exception as e:
            raise LLMError(provider, f"Provider error: {e}")

        return {"content": content}
