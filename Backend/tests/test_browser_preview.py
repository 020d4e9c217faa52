# tests/test_browser_preview.py
"""
End-to-end preview against headless Chromium and the CDN.

Skipped when Chromium is not installed or the CDN cannot be reached.
Run with: pytest -m browser
"""
import pytest

from faber.core.config import PreviewSettings
from faber.core.types import GeneratedFile, SessionStatus
from faber.sandbox import PlaywrightRuntime, PreviewEngine
from tests.conftest import COUNTER_COMPONENT


def test_host_allowlist():
    runtime = PlaywrightRuntime(PreviewSettings(allowed_hosts=("unpkg.com",)))
    assert runtime._host_allowed("https://unpkg.com/react@18/umd/react.development.js")
    assert runtime._host_allowed("https://cdn.unpkg.com/x.js")
    assert runtime._host_allowed("data:image/png;base64,AAAA")
    assert not runtime._host_allowed("https://evil.example/unpkg.com.js")
    assert not runtime._host_allowed("https://api.example.com/items")


async def run_or_skip(engine, files):
    session = await engine.run(files, version=1)
    if session.error_kind == "resource" or session.error_kind == "timeout":
        await engine.close()
        await engine.runtime.shutdown()
        pytest.skip(f"Preview runtime unavailable: {session.error}")
    return session


@pytest.fixture
def engine():
    return PreviewEngine(PlaywrightRuntime(PreviewSettings(timeout_ms=20000)))


@pytest.mark.browser
@pytest.mark.asyncio
async def test_counter_renders(engine):
    session = await run_or_skip(engine, [GeneratedFile("src/App.tsx", COUNTER_COMPONENT)])
    try:
        assert session.status == SessionStatus.SUCCESS
        assert session.load_time_ms > 0
    finally:
        await engine.close()
        await engine.runtime.shutdown()


@pytest.mark.browser
@pytest.mark.asyncio
async def test_syntax_error_is_a_compile_error(engine):
    broken = "export default function App() {\n  return <div>Hi</div>;\n"
    session = await run_or_skip(engine, [GeneratedFile("src/App.tsx", broken)])
    try:
        assert session.status == SessionStatus.ERROR
        assert session.error_kind == "compile"
    finally:
        await engine.close()
        await engine.runtime.shutdown()


@pytest.mark.browser
@pytest.mark.asyncio
async def test_render_crash_is_a_runtime_error(engine):
    crashing = (
        "export default function App() {\n"
        "  const items = undefined;\n"
        "  return <ul>{items.map((i) => <li key={i}>{i}</li>)}</ul>;\n"
        "}\n"
    )
    session = await run_or_skip(engine, [GeneratedFile("src/App.tsx", crashing)])
    try:
        assert session.status == SessionStatus.ERROR
        assert session.error_kind == "runtime"
        assert session.error
    finally:
        await engine.close()
        await engine.runtime.shutdown()
