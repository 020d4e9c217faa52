# tests/conftest.py
"""
Shared pytest fixtures for Faber Studio tests.

Provides:
- Sample component sources
- Validator, telemetry and settings fixtures
- Scripted runtime and generator collaborators
- An ASGI client wired to a test container
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from faber.container import build_container
from faber.core.config import GenerationSettings, PreviewSettings, Settings
from faber.core.types import GeneratedFile
from faber.telemetry.aggregator import TelemetryLog
from faber.validation.code_validator import CodeValidator
from tests.utils.fake_generator import ScriptedGenerator
from tests.utils.scripted_runtime import ScriptedRuntime


# ═══════════════════════════════════════════════════════
# SAMPLE SOURCES
# ═══════════════════════════════════════════════════════

COUNTER_COMPONENT = """import React, { useState } from 'react';

export default function App() {
  const [count, setCount] = useState(0);

  return (
    <div className="p-4 md:p-8 bg-background text-foreground">
      <h1 className="text-2xl font-bold">Counter</h1>
      <button
        type="button"
        onClick={() => setCount(count + 1)}
        className="bg-primary text-primary-foreground px-4 py-2 rounded-md"
      >
        Clicked {count} times
      </button>
    </div>
  );
}
"""

MINIMAL_APP = "export default function App(){ return <div>Hi</div>; }"


@pytest.fixture
def counter_component() -> str:
    return COUNTER_COMPONENT


@pytest.fixture
def minimal_files():
    return [GeneratedFile(path="src/App", content=MINIMAL_APP)]


@pytest.fixture
def counter_files():
    return [GeneratedFile(path="src/App.tsx", content=COUNTER_COMPONENT)]


# ═══════════════════════════════════════════════════════
# SERVICES
# ═══════════════════════════════════════════════════════

@pytest.fixture
def validator():
    return CodeValidator()


@pytest.fixture
def telemetry():
    return TelemetryLog(max_events=50)


@pytest.fixture
def generation_settings():
    return GenerationSettings(
        call_timeout_s=1.0,
        acceptance_score=60,
        validate_results=True,
        max_feedback_rounds=1,
    )


@pytest.fixture
def preview_settings():
    return PreviewSettings(timeout_ms=500)


@pytest.fixture
def test_settings(generation_settings, preview_settings):
    return Settings(generation=generation_settings, preview=preview_settings)


# ═══════════════════════════════════════════════════════
# COLLABORATORS
# ═══════════════════════════════════════════════════════

@pytest.fixture
def scripted_runtime():
    """Every page loads, then reports READY after 25ms of rendering."""
    return ScriptedRuntime(default=[{"type": "LOAD_START"}, {"type": "READY", "loadTimeMs": 25}])


@pytest.fixture
def generator():
    return ScriptedGenerator()


# ═══════════════════════════════════════════════════════
# HTTP
# ═══════════════════════════════════════════════════════

@pytest.fixture
def container(test_settings, generator, scripted_runtime):
    return build_container(test_settings, generator=generator, runtime=scripted_runtime)


@pytest_asyncio.fixture
async def async_client(container):
    from faber.main import app, limiter

    previous = getattr(app.state, "container", None)
    app.state.container = container
    limiter.enabled = False
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client
    finally:
        await container.previews.shutdown()
        app.state.container = previous
        limiter.enabled = True
