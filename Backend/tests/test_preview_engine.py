# tests/test_preview_engine.py
"""
Preview engine lifecycle tests against the scripted runtime.

Covers the terminal-status guarantees:
- exactly one terminal transition per session
- timeout fires once and only while loading
- messages from superseded contexts are ignored
- stale versions never replace a newer session
"""
import asyncio

import pytest

from faber.core.config import PreviewSettings
from faber.core.exceptions import SandboxError, SandboxRuntimeError, SandboxTimeout
from faber.core.types import GeneratedFile, SessionStatus
from faber.sandbox import PreviewEngine
from faber.sandbox import protocol
from faber.sandbox.session import PreviewSession
from faber.telemetry import TelemetryLog
from tests.utils.scripted_runtime import ScriptedRuntime


FILES = [GeneratedFile("src/App.tsx", "export default function App() { return <div>Hi</div>; }")]


def make_engine(runtime, timeout_ms=500, **kwargs):
    return PreviewEngine(runtime, PreviewSettings(timeout_ms=timeout_ms), TelemetryLog(max_events=50), **kwargs)


# ═══════════════════════════════════════════════════════
# TERMINAL STATES
# ═══════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_ready_produces_success(scripted_runtime):
    engine = make_engine(scripted_runtime)
    session = await engine.run(FILES, version=1)

    assert session.status == SessionStatus.SUCCESS
    assert session.load_time_ms == 25
    assert session.error is None
    scripted_runtime.counter.assert_exact("launch", 1)
    await engine.close()


@pytest.mark.asyncio
async def test_ready_without_time_uses_elapsed():
    runtime = ScriptedRuntime(default=[protocol.load_start(), {"type": "READY"}])
    engine = make_engine(runtime)
    session = await engine.run(FILES, version=1)
    assert session.status == SessionStatus.SUCCESS
    assert session.load_time_ms >= 1
    await engine.close()


def test_host_load_time_counts_from_load_start():
    session = PreviewSession("s1", 1, tuple(FILES))
    session.started_at -= 30
    session.mark_load_started()
    first_mark = session.load_started_at
    session.mark_load_started()

    assert session.load_started_at == first_mark
    assert session.succeed(None)
    assert session.load_time_ms < 30_000


@pytest.mark.asyncio
async def test_render_error_reported_once():
    runtime = ScriptedRuntime(default=[
        protocol.load_start(),
        protocol.error("Cannot read properties of undefined (reading 'map')", kind="runtime", line=3),
        protocol.ready(10),
        protocol.error("second failure"),
    ])
    engine = make_engine(runtime)
    session = await engine.run(FILES, version=1)
    await asyncio.sleep(0.02)

    assert session.status == SessionStatus.ERROR
    assert session.error.startswith("Cannot read properties")
    assert session.error_kind == "runtime"
    assert session.error_details == {"line": 3}
    assert isinstance(session.as_exception(), SandboxRuntimeError)

    errors = [e for e in engine.telemetry.events() if e.level == "error"]
    assert len(errors) == 1
    assert errors[0].detail["kind"] == "runtime"
    assert errors[0].detail["hint"]
    await engine.close()


@pytest.mark.asyncio
async def test_first_terminal_message_wins():
    runtime = ScriptedRuntime(default=[protocol.ready(12), protocol.error("too late")])
    engine = make_engine(runtime)
    session = await engine.run(FILES, version=1)
    await asyncio.sleep(0.02)
    assert session.status == SessionStatus.SUCCESS
    assert session.error is None
    await engine.close()


@pytest.mark.asyncio
async def test_silent_page_times_out_once():
    runtime = ScriptedRuntime(default=[])
    engine = make_engine(runtime, timeout_ms=50)
    session = await engine.run(FILES, version=1)

    assert session.status == SessionStatus.ERROR
    assert session.error_kind == "timeout"
    assert "50ms" in session.error
    assert isinstance(session.as_exception(), SandboxTimeout)

    # A late READY after the timeout changes nothing
    runtime.send(session.session_id, protocol.ready(5))
    await asyncio.sleep(0.08)
    assert session.status == SessionStatus.ERROR
    assert len([e for e in engine.telemetry.events() if e.level == "error"]) == 1
    await engine.close()


@pytest.mark.asyncio
async def test_timer_cancelled_after_success():
    runtime = ScriptedRuntime(default=[protocol.ready(3)])
    engine = make_engine(runtime, timeout_ms=40)
    session = await engine.run(FILES, version=1)
    await asyncio.sleep(0.08)
    assert session.status == SessionStatus.SUCCESS
    assert not any(e.level == "error" for e in engine.telemetry.events())
    await engine.close()


@pytest.mark.asyncio
async def test_launch_failure_is_a_resource_error():
    runtime = ScriptedRuntime(launch_error=RuntimeError("browser missing"))
    engine = make_engine(runtime)
    session = await engine.run(FILES, version=1)
    assert session.status == SessionStatus.ERROR
    assert session.error_kind == "resource"
    assert "browser missing" in session.error
    await engine.close()


# ═══════════════════════════════════════════════════════
# SUPERSESSION / VERSIONS
# ═══════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_new_version_supersedes_loading_session():
    runtime = ScriptedRuntime(scripts=[[]], default=[protocol.ready(8)])
    engine = make_engine(runtime)

    first = await engine.load(FILES, version=1)
    await asyncio.sleep(0.01)
    second = await engine.run(FILES, version=2)

    assert first.superseded is True
    assert first.status == SessionStatus.LOADING
    assert runtime.contexts[0].closed is True
    assert second.status == SessionStatus.SUCCESS
    assert engine.active is second

    # Waiting on a superseded session returns immediately
    assert await asyncio.wait_for(engine.wait(first), timeout=0.1) is first
    await engine.close()


@pytest.mark.asyncio
async def test_messages_from_old_context_are_dropped():
    runtime = ScriptedRuntime(scripts=[[], []])
    engine = make_engine(runtime)

    first = await engine.load(FILES, version=1)
    await asyncio.sleep(0.01)
    second = await engine.load(FILES, version=2)
    await asyncio.sleep(0.01)

    runtime.send(first.session_id, protocol.ready(5))
    assert first.status == SessionStatus.LOADING
    assert second.status == SessionStatus.LOADING

    runtime.send(second.session_id, protocol.ready(5))
    assert second.status == SessionStatus.SUCCESS
    await engine.close()


@pytest.mark.asyncio
async def test_stale_version_is_ignored(scripted_runtime):
    engine = make_engine(scripted_runtime)
    newer = await engine.run(FILES, version=3)
    stale = await engine.load([GeneratedFile("src/App.tsx", "export default function App() { return <p/>; }")], version=2)

    assert stale is newer
    assert engine.active.version == 3
    scripted_runtime.counter.assert_exact("launch", 1)
    await engine.close()


@pytest.mark.asyncio
async def test_retry_uses_fresh_context():
    runtime = ScriptedRuntime(scripts=[[protocol.error("Boom")]], default=[protocol.ready(4)])
    engine = make_engine(runtime)

    failed = await engine.run(FILES, version=1)
    assert failed.status == SessionStatus.ERROR

    retried = await engine.wait(await engine.retry())
    assert retried.status == SessionStatus.SUCCESS
    assert retried.retry_count == 1
    assert retried.version == 1
    assert retried.session_id != failed.session_id
    assert runtime.contexts[0].closed
    runtime.counter.assert_exact("launch", 2)
    await engine.close()


@pytest.mark.asyncio
async def test_retry_without_session_raises():
    engine = make_engine(ScriptedRuntime())
    with pytest.raises(SandboxError):
        await engine.retry()


# ═══════════════════════════════════════════════════════
# PROTOCOL / NOTIFICATIONS
# ═══════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_malformed_and_debug_messages_are_telemetry_only():
    runtime = ScriptedRuntime(default=[
        "not json",
        {"type": "HELLO"},
        protocol.debug("rendering list", debug_type="console.log", data={"n": 3}),
        protocol.ready(6),
    ])
    engine = make_engine(runtime)
    session = await engine.run(FILES, version=1)

    assert session.status == SessionStatus.SUCCESS
    messages = [e.message for e in engine.telemetry.events() if e.source == "sandbox"]
    assert sum(m.startswith("Malformed boundary message") for m in messages) == 2
    assert "rendering list" in messages
    await engine.close()


@pytest.mark.asyncio
async def test_status_callback_sees_start_and_finish(scripted_runtime):
    seen = []

    async def on_status(session):
        seen.append(session.session_id)

    engine = make_engine(scripted_runtime, on_status=on_status)
    session = await engine.run(FILES, version=1)
    await engine.close()

    assert seen == [session.session_id, session.session_id]


@pytest.mark.asyncio
async def test_close_tears_down_live_context():
    runtime = ScriptedRuntime(default=[])
    engine = make_engine(runtime)
    session = await engine.load(FILES, version=1)
    await asyncio.sleep(0.01)
    await engine.close()

    assert engine.active is None
    assert session.superseded
    assert runtime.contexts[0].closed
