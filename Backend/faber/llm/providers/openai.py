# faber/llm/providers/openai.py
"""
OpenAI provider implementation.
"""
import aiohttp
from typing import Optional

from faber.core.config import LLMSettings
from faber.core.exceptions import LLMError, RateLimitError, ServiceUnavailable


DEFAULT_MODEL = "gpt-4o-mini"
API_URL = "https://api.openai.com/v1/chat/completions"


async def call(
    prompt: str,
    system_prompt: str = "",
    model: Optional[str] = None,
    temperature: float = 0.3,
    max_tokens: int = 4000,
    config: Optional[LLMSettings] = None,
) -> str:
    """
    Call the OpenAI chat completions API.

    Returns:
        The generated text

    Raises:
        ServiceUnavailable when no API key is configured
        RateLimitError on 429, LLMError on any other API failure
    """
    config = config or LLMSettings()
    if not config.openai_api_key:
        raise ServiceUnavailable("openai", "OPENAI_API_KEY not configured")

    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})

    payload = {
        "model": model or DEFAULT_MODEL,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    headers = {
        "Authorization": f"Bearer {config.openai_api_key}",
        "Content-Type": "application/json",
    }

    async with aiohttp.ClientSession() as session:
        async with session.post(
            API_URL,
            json=payload,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=config.request_timeout_s)
        ) as response:
            if response.status == 429:
                raise RateLimitError("openai")

            if response.status != 200:
                text = await response.text()
                raise LLMError("openai", f"API error {response.status}: {text[:200]}")

            data = await response.json()

            try:
                return data["choices"][0]["message"]["content"]
            except (KeyError, IndexError, TypeError) as e:
                raise LLMError("openai", f"Failed to parse response: {e}")
