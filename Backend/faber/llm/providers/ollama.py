# faber/llm/providers/ollama.py
"""
Ollama provider implementation.
"""
import aiohttp
from typing import Optional

from faber.core.config import LLMSettings
from faber.core.exceptions import LLMError, ServiceUnavailable


DEFAULT_MODEL = "qwen2.5-coder:7b"


async def call(
    prompt: str,
    system_prompt: str = "",
    model: Optional[str] = None,
    temperature: float = 0.3,
    max_tokens: int = 4000,
    config: Optional[LLMSettings] = None,
) -> str:
    """Call a local Ollama server. No API key needed."""
    config = config or LLMSettings()
    api_url = f"{config.ollama_base_url}/api/chat"

    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})

    payload = {
        "model": model or DEFAULT_MODEL,
        "messages": messages,
        "stream": False,
        "options": {
            "temperature": temperature,
            "num_predict": max_tokens,
        },
    }

    try:
        async with aiohttp.ClientSession() as session:
            async with session.post(
                api_url,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=config.request_timeout_s)
            ) as response:
                if response.status != 200:
                    text = await response.text()
                    raise LLMError("ollama", f"API error {response.status}: {text[:200]}")

                data = await response.json()
    except aiohttp.ClientConnectorError as e:
        raise ServiceUnavailable("ollama", f"Cannot reach {config.ollama_base_url}: {e}")

    try:
        return data["message"]["content"]
    except (KeyError, TypeError) as e:
        raise LLMError("ollama", f"Failed to parse response: {e}")
