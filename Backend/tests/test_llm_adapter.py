# tests/test_llm_adapter.py
"""
LLM adapter dispatch and error mapping.
"""
from unittest.mock import AsyncMock, patch

import pytest

from faber.core.config import LLMSettings
from faber.core.exceptions import LLMError, RateLimitError, ServiceUnavailable
from faber.llm import LLMGenerator


@pytest.mark.asyncio
async def test_dispatches_to_configured_provider():
    fake = AsyncMock(return_value="export default function App() { return <div/>; }")
    generator = LLMGenerator(LLMSettings(default_provider="openai", default_model="gpt-4o-mini"))

    with patch.dict(LLMGenerator.provider_map, {"openai": fake}):
        result = await generator.generate("a card", {"temperature": 0.7, "max_tokens": 2000}, "system")

    assert result == {"content": "export default function App() { return <div/>; }"}
    fake.assert_awaited_once()
    kwargs = fake.await_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["temperature"] == 0.7
    assert kwargs["max_tokens"] == 2000
    assert kwargs["system_prompt"] == "system"


@pytest.mark.asyncio
async def test_params_override_provider_and_model():
    fake = AsyncMock(return_value="ok")
    generator = LLMGenerator(LLMSettings(default_provider="openai"))

    with patch.dict(LLMGenerator.provider_map, {"ollama": fake}):
        await generator.generate("x", {"provider": "ollama", "model": "llama3"})

    assert fake.await_args.kwargs["model"] == "llama3"


@pytest.mark.asyncio
async def test_unknown_provider():
    with pytest.raises(LLMError) as exc:
        await LLMGenerator().generate("x", {"provider": "nope"})
    assert "Unknown provider" in exc.value.message


@pytest.mark.asyncio
async def test_missing_openai_key_is_service_unavailable():
    generator = LLMGenerator(LLMSettings(default_provider="openai", openai_api_key=None))
    with pytest.raises(ServiceUnavailable) as exc:
        await generator.generate("x")
    assert exc.value.service == "openai"


@pytest.mark.asyncio
async def test_typed_errors_pass_through():
    fake = AsyncMock(side_effect=RateLimitError("openai"))
    with patch.dict(LLMGenerator.provider_map, {"openai": fake}):
        with pytest.raises(RateLimitError):
            await LLMGenerator(LLMSettings(default_provider="openai")).generate("x")


@pytest.mark.asyncio
async def test_unexpected_errors_are_wrapped():
    fake = AsyncMock(side_effect=ConnectionResetError("peer reset"))
    with patch.dict(LLMGenerator.provider_map, {"openai": fake}):
        with pytest.raises(LLMError) as exc:
            await LLMGenerator(LLMSettings(default_provider="openai")).generate("x")
    assert "peer reset" in exc.value.message
    assert exc.value.provider == "openai"
